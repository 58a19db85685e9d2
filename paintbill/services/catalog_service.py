from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel

from paintbill.models.invoice import Invoice
from paintbill.models.line_item import DEFAULT_UNIT, LineItem


# ----------------- Modèles ----------------- #

class RateCardEntry(BaseModel):
    name: str
    default_rate: float = 0.0

    @property
    def english_label(self) -> str:
        """'एस इमल्शन (Ace Emulsion)' -> 'Ace Emulsion'"""
        m = re.search(r"\(([^)]*)\)\s*$", self.name)
        return m.group(1).strip() if m else self.name.strip()


RATE_CARD: List[RateCardEntry] = [
    # Rate card (Marathi + English)
    RateCardEntry(name="एस स्पार्क (Ace Spark)", default_rate=13),
    RateCardEntry(name="एस इमल्शन (Ace Emulsion)", default_rate=15),
    RateCardEntry(name="अपिक्स इमल्शन (Apex Emulsion)", default_rate=17),
    RateCardEntry(name="अपिक्स अल्टिमा (Apex Ultima)", default_rate=20),
    RateCardEntry(name="अल्टिमा प्रोटेक (Ultima Protek)", default_rate=22),
    RateCardEntry(name="डॅम्प प्रूफ (Damp Proof)", default_rate=14),
    RateCardEntry(name="ग्रील ऑईल पेंट (Grill Oil Paint)", default_rate=40),
    RateCardEntry(name="साफसफाई (Cleaning)", default_rate=4),
    # Autres travaux courants
    RateCardEntry(name="साईड काम (Side Work)", default_rate=0),
    RateCardEntry(name="इंटेरिअर पेंटिंग (Interior Painting)", default_rate=12),
    RateCardEntry(name="पुट्टी २ कोट (Putty 2 Coat)", default_rate=12),
    RateCardEntry(name="पॉलिश काम (Polish Work)", default_rate=35),
    RateCardEntry(name="पीओपी फॉल्स सीलिंग (POP False Ceiling)", default_rate=45),
    RateCardEntry(name="वॉटरप्रूफिंग (Waterproofing)", default_rate=18),
    RateCardEntry(name="टेक्चर डिझाईन (Texture Design)", default_rate=25),
    RateCardEntry(name="रॉयल प्ले (Royal Play)", default_rate=35),
    RateCardEntry(name="इतर कामे (Other Work)", default_rate=0),
]


# ----------------- Service Catalogue ----------------- #

class CatalogService:
    """
    Grille tarifaire des travaux de peinture.
    - Recherche par nom complet ou par libellé anglais (insensible à la casse)
    - Un nom hors grille devient une ligne libre à 0
    """

    def __init__(self, entries: Optional[Iterable[RateCardEntry]] = None, default_unit: str = DEFAULT_UNIT) -> None:
        self.entries: List[RateCardEntry] = list(entries) if entries is not None else list(RATE_CARD)
        self.default_unit = default_unit

    def list_entries(self) -> List[RateCardEntry]:
        return list(self.entries)

    def find(self, name: str) -> Optional[RateCardEntry]:
        probe = (name or "").strip().casefold()
        if not probe:
            return None
        for e in self.entries:
            if e.name.strip().casefold() == probe or e.english_label.casefold() == probe:
                return e
        return None

    def make_item(self, name: str, rate: Any = None) -> LineItem:
        entry = self.find(name)
        if rate is None:
            rate = entry.default_rate if entry else 0
        label = entry.name if entry else (name or "").strip()
        return LineItem.create(label, self.default_unit, rate)

    def add_to_invoice(self, invoice: Invoice, name: str, rate: Any = None) -> LineItem:
        invoice.add_item(self.make_item(name, rate))
        return invoice.items[-1]
