from __future__ import annotations
import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional


class StorageError(RuntimeError):
    """Lecture ou écriture impossible côté stockage durable."""


class InvoiceRepository:
    """
    Collaborateur de stockage: charge / sauve la collection complète.
    Pas de deltas: save() reçoit toujours toute la liste.
    """

    def load(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def save(self, records: Iterable[Mapping[str, Any]]) -> None:
        raise NotImplementedError


class MemoryRepository(InvoiceRepository):
    """Stockage en mémoire (tests, sessions jetables)."""

    def __init__(self, records: Optional[Iterable[Mapping[str, Any]]] = None, *, fail_on_save: bool = False):
        self.records: List[Dict[str, Any]] = [dict(r) for r in (records or [])]
        self.fail_on_save = fail_on_save
        self.save_count = 0

    def load(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self.records)

    def save(self, records: Iterable[Mapping[str, Any]]) -> None:
        if self.fail_on_save:
            raise StorageError("save refused")
        self.records = copy.deepcopy([dict(r) for r in records])
        self.save_count += 1
