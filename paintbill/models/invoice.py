from __future__ import annotations
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from .common import gen_id, to_amount, today_str
from .line_item import LineItem

InvoiceStatus = Literal["Pending", "Paid", "Overdue"]

EDITABLE_ITEM_FIELDS = ("description", "unit", "quantity", "rate")


class ClientDetails(BaseModel):
    name: str = ""
    phone: str = ""
    address: str = ""

    @field_validator("name", "phone", "address", mode="before")
    @classmethod
    def _clean_text(cls, v: Any) -> str:
        return "" if v is None else str(v)


class Invoice(BaseModel):
    """
    Facture (brouillon ou enregistrée).
    subtotal / total / balance sont dérivés: recalculés à la construction
    et après chaque mutation, jamais patchés incrémentalement.
    """
    class Config:
        validate_assignment = True
        extra = "ignore"

    id: str = Field(default_factory=gen_id, frozen=True)
    number: str = "001"
    date: str = Field(default_factory=today_str)
    start_date: Optional[str] = None  # début des travaux
    end_date: Optional[str] = None    # fin des travaux

    client: ClientDetails = Field(default_factory=ClientDetails)
    items: List[LineItem] = Field(default_factory=list)

    subtotal: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    advance: float = 0.0
    balance: float = 0.0

    # saisi à la main, pas dérivé du solde
    status: InvoiceStatus = "Pending"
    notes: str = ""

    # la facture garde ses propres copies (client, lignes)
    @field_validator("client", mode="before")
    @classmethod
    def _own_client(cls, v: Any) -> Any:
        return v.model_copy(deep=True) if isinstance(v, BaseModel) else v

    @field_validator("items", mode="before")
    @classmethod
    def _own_items(cls, v: Any) -> Any:
        if v is None:
            return []
        return [it.model_copy(deep=True) if isinstance(it, BaseModel) else it for it in v]

    @field_validator("discount", "advance", mode="before")
    @classmethod
    def _clean_number(cls, v: Any) -> float:
        return to_amount(v)

    @field_validator("notes", mode="before")
    @classmethod
    def _clean_notes(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @model_validator(mode="after")
    def _derive(self) -> "Invoice":
        return self.recompute()

    @classmethod
    def create_draft(cls, next_number: str, today: Optional[str] = None) -> "Invoice":
        return cls(number=next_number, date=today or today_str())

    def recompute(self) -> "Invoice":
        subtotal = sum(it.recompute().amount for it in self.items)
        total = max(0.0, subtotal - self.discount)
        balance = max(0.0, total - self.advance)
        object.__setattr__(self, "subtotal", subtotal)
        object.__setattr__(self, "total", total)
        object.__setattr__(self, "balance", balance)
        return self

    # ---------------- Lignes ---------------- #

    def find_item(self, item_id: str) -> Optional[LineItem]:
        for it in self.items:
            if it.id == item_id:
                return it
        return None

    def add_item(self, item: LineItem) -> "Invoice":
        self.items.append(item.model_copy(deep=True))
        return self.recompute()

    def remove_item(self, item_id: str) -> "Invoice":
        kept = [it for it in self.items if it.id != item_id]
        if len(kept) != len(self.items):
            self.items = kept
        return self.recompute()

    def update_item(self, item_id: str, field: str, value: Any) -> "Invoice":
        if field not in EDITABLE_ITEM_FIELDS:
            raise ValueError(f"Cannot update line item field '{field}'")
        it = self.find_item(item_id)
        if it is not None:
            getattr(it, f"set_{field}")(value)
        return self.recompute()

    def step_quantity(self, item_id: str, delta: Any) -> "Invoice":
        """Boutons +/- : la quantité ne descend jamais sous 1."""
        it = self.find_item(item_id)
        if it is not None:
            try:
                step = float(delta)
            except (TypeError, ValueError):
                step = 0.0
            it.set_quantity(max(1.0, it.quantity + step))
        return self.recompute()

    # ---------------- Paiement ---------------- #

    def set_discount(self, value: Any) -> "Invoice":
        self.discount = value
        return self.recompute()

    def set_advance(self, value: Any) -> "Invoice":
        self.advance = value
        return self.recompute()

    def set_status(self, status: InvoiceStatus) -> "Invoice":
        self.status = status
        return self
