from __future__ import annotations
import math
from typing import Any, List

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]


def _words(n: int) -> List[str]:
    if n < 20:
        return [_ONES[n]] if n else []
    if n < 100:
        return [_TENS[n // 10]] + _words(n % 10)
    if n < 1000:
        return [_ONES[n // 100], "Hundred"] + _words(n % 100)
    if n < 100000:
        return _words(n // 1000) + ["Thousand"] + _words(n % 1000)
    if n < 10000000:
        return _words(n // 100000) + ["Lakh"] + _words(n % 100000)
    return _words(n // 10000000) + ["Crore"] + _words(n % 10000000)


def words_for(n: Any) -> str:
    """
    Montant en toutes lettres, numération indienne (lakh, crore).
    Seule la partie entière est convertie (paise tronqués).
    """
    value = math.floor(float(n))
    if value < 0:
        raise ValueError("words_for expects a non-negative amount")
    if value == 0:
        return "Zero"
    return " ".join(_words(value)) + " Only"


def format_inr(value: Any) -> str:
    """150000 -> '₹1,50,000' (groupement indien, paise si non nuls)."""
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    paise = round(abs(amount) * 100)
    rupees, frac = divmod(paise, 100)

    digits = str(rupees)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    out = f"{sign}₹{digits}"
    if frac:
        out += f".{frac:02d}"
    return out
