from __future__ import annotations
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any
import math
import re
import uuid

def gen_id() -> str:
    return str(uuid.uuid4())

def today_str() -> str:
    return date.today().isoformat()

def to_amount(val: Any) -> float:
    """
    Conversion "souple" -> nombre >= 0.
    Toute saisie invalide (vide, texte, NaN, négatif) vaut 0.
    """
    if val is None or isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float, Decimal)):
        try:
            f = float(val)
        except (OverflowError, ValueError):
            return 0.0
    else:
        # seuls ₹, espaces et séparateurs de milliers ("1,50,000") sont retirés
        s = re.sub(r"[₹\s,]", "", str(val))
        if not s:
            return 0.0
        try:
            f = float(Decimal(s))
        except (InvalidOperation, ValueError):
            return 0.0
    if math.isnan(f) or math.isinf(f):
        return 0.0
    return max(0.0, f)
