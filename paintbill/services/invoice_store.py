from __future__ import annotations
import logging
from typing import List, Optional

from pydantic import ValidationError

from paintbill.models.invoice import Invoice
from paintbill.storage.repo import InvoiceRepository, StorageError

log = logging.getLogger(__name__)


class InvoiceStore:
    """
    Collection de toutes les factures, la plus récente en tête.
    Chargée une fois depuis le repo, réécrite en entier après chaque upsert.
    Pas thread-safe: un seul écrivain à la fois.
    """

    def __init__(self, repo: InvoiceRepository):
        self.repo = repo
        self._invoices: List[Invoice] = []
        self.load_all()

    def load_all(self) -> List[Invoice]:
        out: List[Invoice] = []
        for d in self.repo.load():
            try:
                out.append(Invoice.model_validate(d))
            except ValidationError as e:
                # on refuse plutôt que de perdre l'enregistrement au prochain save
                log.error("Facture illisible dans le stockage: %s", e)
                raise StorageError(f"Invalid invoice record: {e}") from e
        self._invoices = out
        return self.all()

    # ----------- lecture -----------
    def all(self) -> List[Invoice]:
        return [inv.model_copy(deep=True) for inv in self._invoices]

    def count(self) -> int:
        return len(self._invoices)

    def get(self, invoice_id: str) -> Optional[Invoice]:
        idx = self._index_of(invoice_id)
        if idx < 0:
            return None
        return self._invoices[idx].model_copy(deep=True)

    def next_number(self) -> str:
        # count+1: pas de compteur durable, cf. DESIGN.md
        return f"{self.count() + 1:03d}"

    # ----------- écriture -----------
    def upsert(self, invoice: Invoice) -> Invoice:
        record = invoice.model_copy(deep=True).recompute()
        data = list(self._invoices)
        idx = self._index_of(record.id)
        if idx < 0:
            data.insert(0, record)
        else:
            data[idx] = record

        # write-through; en cas d'échec l'état mémoire reste inchangé
        self.repo.save([inv.model_dump(mode="json") for inv in data])
        self._invoices = data
        log.info("Facture %s (%s) enregistrée", record.number, record.id)
        return record.model_copy(deep=True)

    def _index_of(self, invoice_id: str) -> int:
        for i, inv in enumerate(self._invoices):
            if inv.id == invoice_id:
                return i
        return -1
