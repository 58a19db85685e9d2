"""Home dashboard figures computed from the invoice collection."""

from __future__ import annotations
from typing import Iterable, List

from pydantic import BaseModel, Field

from paintbill.models.invoice import Invoice

RECENT_COUNT = 3


class DashboardStats(BaseModel):
    total_revenue: float = 0.0   # cash in hand: somme des avances
    pending_amount: float = 0.0  # reste dû: somme des soldes
    invoices_count: int = 0
    recent: List[Invoice] = Field(default_factory=list)


def cash_in_hand(invoices: Iterable[Invoice]) -> float:
    return sum(inv.advance for inv in invoices)


def pending_due(invoices: Iterable[Invoice]) -> float:
    return sum(inv.balance for inv in invoices)


def recent_invoices(invoices: Iterable[Invoice], n: int = RECENT_COUNT) -> List[Invoice]:
    # la collection est déjà triée, plus récente en tête
    return list(invoices)[: max(0, n)]


def dashboard_stats(invoices: Iterable[Invoice], recent_n: int = RECENT_COUNT) -> DashboardStats:
    invoices = list(invoices)
    return DashboardStats(
        total_revenue=cash_in_hand(invoices),
        pending_amount=pending_due(invoices),
        invoices_count=len(invoices),
        recent=recent_invoices(invoices, recent_n),
    )
