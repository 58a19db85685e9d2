from __future__ import annotations

import glob
import json
import logging
import os
import shutil
import tempfile
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from .repo import InvoiceRepository, StorageError

log = logging.getLogger(__name__)


def _json_default(o: Any) -> Any:
    if isinstance(o, (date, datetime)):
        return o.isoformat()
    raise TypeError(f"Object of type {o.__class__.__name__} is not JSON serializable")


class JsonRepository(InvoiceRepository):
    """
    Fichier JSON contenant la liste complète des factures.
    - Écriture atomique (fichier temporaire + os.replace)
    - Rotation de backups (backup_enabled, backup_keep)
    - N'écrit pas si le contenu ne change pas (réduction du bruit et des .bak)
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        *,
        backup_enabled: bool = True,
        backup_keep: int = 5,
    ) -> None:
        self.filepath = Path(filepath)
        self._lock = threading.Lock()
        self.backup_enabled = backup_enabled
        self.backup_keep = max(0, int(backup_keep))

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    # ---------------- Lecture ---------------- #

    def load(self) -> List[Dict[str, Any]]:
        if not self.filepath.exists():
            return []
        try:
            raw = self.filepath.read_text(encoding="utf-8")
        except OSError as e:
            log.error("Lecture impossible de %s: %s", self.filepath, e)
            raise StorageError(f"Cannot read {self.filepath}: {e}") from e
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            # Fichier corrompu → copie de côté, on ne l'écrase pas
            backup = self.filepath.with_suffix(".corrupt.json")
            try:
                shutil.copy2(self.filepath, backup)
            except OSError:
                log.warning("Impossible de copier %s vers %s", self.filepath, backup)
            log.error("Fichier de factures corrompu: %s", self.filepath)
            raise StorageError(f"Corrupt invoice file {self.filepath}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"{self.filepath} does not contain a list of invoices")
        return data

    # ---------------- Écriture ---------------- #

    def _rotate_backups(self) -> None:
        if not self.backup_enabled or self.backup_keep <= 0:
            return
        pattern = str(self.filepath.with_suffix(".*.bak.json"))
        files = sorted(glob.glob(pattern))
        # garde les plus récents
        for old in files[: max(0, len(files) - self.backup_keep)]:
            try:
                Path(old).unlink(missing_ok=True)
            except OSError:
                log.warning("Backup non supprimé: %s", old)

    def _backup(self) -> None:
        ts = datetime.now().strftime("%Y%m%d-%H%M%S")
        backup = self.filepath.with_suffix(f".{ts}.bak.json")
        try:
            shutil.copy2(self.filepath, backup)
        except OSError:
            log.warning("Backup impossible: %s", backup)
        self._rotate_backups()

    def save(self, records: Iterable[Mapping[str, Any]]) -> None:
        with self._lock:
            try:
                new_dump = json.dumps(
                    [dict(r) for r in records], ensure_ascii=False, indent=2, default=_json_default
                )
            except (TypeError, ValueError) as e:
                raise StorageError(f"Cannot serialize invoices: {e}") from e

            # si contenu identique → ne rien faire
            if self.filepath.exists():
                try:
                    if self.filepath.read_text(encoding="utf-8") == new_dump:
                        return
                except OSError:
                    pass
                if self.backup_enabled:
                    self._backup()

            # write: tout ou rien
            tmp_name = None
            try:
                fd, tmp_name = tempfile.mkstemp(
                    dir=str(self.filepath.parent), prefix=self.filepath.stem, suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(new_dump)
                os.replace(tmp_name, self.filepath)
            except OSError as e:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                log.error("Écriture impossible de %s: %s", self.filepath, e)
                raise StorageError(f"Cannot write {self.filepath}: {e}") from e
