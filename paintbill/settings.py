from __future__ import annotations
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

# --- Chemins de base ---
ROOT_DIR = Path(__file__).resolve().parents[1]
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates" / "pdf"


def data_dir() -> Path:
    env = os.environ.get("PAINTBILL_DATA_DIR")
    return Path(env) if env else ROOT_DIR / "data"


class CompanyInfo(BaseModel):
    name: str = "Jyotirling Painting Works"
    tagline: str = "All types of painting & waterproofing work"
    phone: str = ""
    address: str = ""
    signatory: str = "Proprietor"


class PdfSettings(BaseModel):
    wkhtmltopdf_path: Optional[str] = None


class AiSettings(BaseModel):
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    timeout_s: float = 30.0


class AppSettings(BaseModel):
    company: CompanyInfo = Field(default_factory=CompanyInfo)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    ai: AiSettings = Field(default_factory=AiSettings)
    default_unit: str = "Sq.ft"

    class Config:
        extra = "ignore"  # tolère d'anciennes clés dans les JSON


def load_settings(path: Optional[os.PathLike | str] = None) -> AppSettings:
    """
    Lit data/settings.json. Fichier absent ou illisible -> valeurs par défaut.
    """
    p = Path(path) if path else data_dir() / "settings.json"
    if not p.exists():
        return AppSettings()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
        return AppSettings.model_validate(raw if isinstance(raw, dict) else {})
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        log.warning("settings.json illisible (%s), valeurs par défaut utilisées", e)
        return AppSettings()


def resolve_api_key(settings: AppSettings) -> Optional[str]:
    for env_key in ("GEMINI_API_KEY", "API_KEY"):
        val = os.environ.get(env_key)
        if val:
            return val
    return settings.ai.api_key or None


def resolve_wkhtmltopdf(settings: AppSettings) -> Optional[str]:
    """wkhtmltopdf: WKHTMLTOPDF / WKHTMLTOPDF_CMD, puis settings.json, puis PATH."""
    candidates = [os.environ.get("WKHTMLTOPDF"), os.environ.get("WKHTMLTOPDF_CMD"), settings.pdf.wkhtmltopdf_path]
    for raw in candidates:
        if not raw:
            continue
        # 'C\:\Program Files\...' -> 'C:\Program Files\...'
        path = os.path.normpath(raw.strip().strip('"').strip("'").replace("\\:", ":"))
        if Path(path).is_file():
            return path
    found = shutil.which("wkhtmltopdf")
    return os.path.normpath(found) if found else None
