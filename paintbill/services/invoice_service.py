# paintbill/services/invoice_service.py
from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional

from paintbill.models.common import to_amount
from paintbill.models.invoice import Invoice
from paintbill.models.line_item import LineItem
from paintbill.services.client_service import ClientService, ClientStats
from paintbill.services.dashboard_service import DashboardStats, dashboard_stats
from paintbill.services.invoice_store import InvoiceStore
from paintbill.services.render_service import RenderService
from paintbill.services.work_parser import WorkDescriptionParser
from paintbill.settings import AppSettings, data_dir, load_settings
from paintbill.storage.json_repo import JsonRepository
from paintbill.storage.repo import InvoiceRepository


class InvoiceService:
    """
    Session d'édition: brouillons, enregistrement, statistiques, export.
    Le brouillon appartient à l'appelant jusqu'à save().
    """

    def __init__(
        self,
        repo: Optional[InvoiceRepository] = None,
        *,
        settings: Optional[AppSettings] = None,
        parser: Optional[WorkDescriptionParser] = None,
        renderer: Optional[RenderService] = None,
    ):
        self.settings = settings or load_settings()
        self.store = InvoiceStore(repo or JsonRepository(data_dir() / "invoices.json"))
        self.clients = ClientService(self.store)
        self.parser = parser or WorkDescriptionParser(self.settings)
        self.renderer = renderer or RenderService(self.settings)

    # ----------- brouillons -----------
    def new_draft(self) -> Invoice:
        return Invoice.create_draft(self.store.next_number())

    def open_for_edit(self, invoice_id: str) -> Optional[Invoice]:
        # copie: les modifications ne touchent pas le store avant save()
        return self.store.get(invoice_id)

    def save(self, draft: Invoice) -> Invoice:
        return self.store.upsert(draft)

    def add_from_description(self, draft: Invoice, text: str) -> List[LineItem]:
        added: List[LineItem] = []
        for row in self.parser.parse(text):
            item = LineItem(
                description=row.description,
                unit=self.settings.default_unit,
                quantity=to_amount(row.quantity),
                rate=0,
            )
            draft.add_item(item)
            added.append(draft.items[-1])
        return added

    # ----------- lecture -----------
    def list_invoices(self) -> List[Invoice]:
        return self.store.all()

    def client_stats(self) -> List[ClientStats]:
        return self.clients.list_clients()

    def dashboard(self) -> DashboardStats:
        return dashboard_stats(self.store.all())

    # ----------- export ----------
    def render_html(self, inv: Invoice) -> str:
        return self.renderer.render_html(inv)

    def export_pdf(self, inv: Invoice, out_dir: Optional[os.PathLike | str] = None) -> str:
        target = Path(out_dir) if out_dir else data_dir().parent / "exports" / "invoices"
        return self.renderer.export_pdf(inv, target)
