from __future__ import annotations
from typing import Dict, Iterable, List

from pydantic import BaseModel

from paintbill.models.invoice import Invoice
from paintbill.services.invoice_store import InvoiceStore


class ClientStats(BaseModel):
    name: str
    count: int = 0
    total: float = 0.0
    last_date: str = ""


def aggregate_clients(invoices: Iterable[Invoice]) -> Dict[str, ClientStats]:
    """
    Regroupe les factures par nom de client (nettoyé des espaces).
    Les noms vides sont ignorés. Ordre = première apparition.
    """
    out: Dict[str, ClientStats] = {}
    for inv in invoices:
        name = (inv.client.name or "").strip()
        if not name:
            continue
        st = out.get(name)
        if st is None:
            st = out[name] = ClientStats(name=name)
        st.count += 1
        st.total += inv.total
        # dates AAAA-MM-JJ: l'ordre lexical suffit
        if inv.date > st.last_date:
            st.last_date = inv.date
    return out


class ClientService:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def list_clients(self) -> List[ClientStats]:
        return list(aggregate_clients(self.store.all()).values())

    def sorted_by_total(self) -> List[ClientStats]:
        return sorted(self.list_clients(), key=lambda c: c.total, reverse=True)

    def invoices_for(self, name: str) -> List[Invoice]:
        key = (name or "").strip()
        if not key:
            return []
        return [inv for inv in self.store.all() if inv.client.name.strip() == key]
