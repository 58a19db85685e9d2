from __future__ import annotations
from typing import Any
from pydantic import BaseModel, Field, field_validator, model_validator
from .common import gen_id, to_amount

UNITS = ("Sq.ft", "Nos", "R.ft", "Lump", "Brass")
DEFAULT_UNIT = "Sq.ft"


class LineItem(BaseModel):
    class Config:
        validate_assignment = True
        extra = "ignore"

    id: str = Field(default_factory=gen_id, frozen=True)
    description: str = ""
    unit: str = DEFAULT_UNIT  # UNITS ou texte libre
    quantity: float = 1.0
    rate: float = 0.0
    amount: float = 0.0  # dérivé, toujours quantity * rate

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def _clean_number(cls, v: Any) -> float:
        return to_amount(v)

    @field_validator("description", "unit", mode="before")
    @classmethod
    def _clean_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @model_validator(mode="after")
    def _derive(self) -> "LineItem":
        # aussi appelé à chaque affectation (validate_assignment)
        return self.recompute()

    @classmethod
    def create(cls, description: str, unit: str = DEFAULT_UNIT, rate: Any = 0) -> "LineItem":
        return cls(description=description, unit=unit, quantity=1, rate=rate)

    def recompute(self) -> "LineItem":
        object.__setattr__(self, "amount", self.quantity * self.rate)
        return self

    # ---------------- Mutations ---------------- #

    def set_quantity(self, q: Any) -> "LineItem":
        self.quantity = q
        return self

    def set_rate(self, r: Any) -> "LineItem":
        self.rate = r
        return self

    def set_description(self, text: Any) -> "LineItem":
        self.description = text
        return self

    def set_unit(self, unit: Any) -> "LineItem":
        self.unit = unit
        return self
