from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ValidationError, field_validator

from paintbill.models.common import to_amount
from paintbill.settings import AppSettings, load_settings, resolve_api_key

log = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

PROMPT = (
    "You are a helper for a Marathi Painting Contractor. "
    'Convert this rough description: "{text}" into a list of items. '
    "Translate everything to simple Marathi. "
    'Example: "2 room color" -> description: "हॉल व बेडरूम ऑईल पेंट", quantity: 2. '
    "Return JSON array."
)

RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "description": {"type": "STRING"},
            "quantity": {"type": "NUMBER"},
        },
        "required": ["description", "quantity"],
    },
}


class ParsedWork(BaseModel):
    description: str
    quantity: float = 1.0

    @field_validator("quantity", mode="before")
    @classmethod
    def _clean_qty(cls, v: Any) -> float:
        return to_amount(v)


class WorkDescriptionParser:
    """
    Texte libre -> lignes (description, quantité) via l'API Gemini.
    Échoue "fermé": sans clé ou en cas d'erreur, renvoie [].
    """

    def __init__(self, settings: Optional[AppSettings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or load_settings()
        self.api_key = resolve_api_key(self.settings)
        self.http = session or requests

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def parse(self, text: str) -> List[ParsedWork]:
        if not self.enabled:
            log.warning("Clé API absente: assistant de saisie désactivé")
            return []
        if not (text or "").strip():
            return []

        payload = {
            "contents": [{"parts": [{"text": PROMPT.format(text=text)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }
        try:
            resp = self.http.post(
                API_URL.format(model=self.settings.ai.model),
                params={"key": self.api_key},
                json=payload,
                timeout=self.settings.ai.timeout_s,
            )
            resp.raise_for_status()
            body = resp.json()
            raw = body["candidates"][0]["content"]["parts"][0]["text"]
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            log.warning("Échec appel Gemini: %s", e)
            return []

        return self._decode(raw)

    @staticmethod
    def _decode(raw: Any) -> List[ParsedWork]:
        if not raw:
            return []
        try:
            rows = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            log.warning("Réponse Gemini illisible: %s", e)
            return []
        if not isinstance(rows, list):
            return []
        out: List[ParsedWork] = []
        for r in rows:
            try:
                out.append(ParsedWork.model_validate(r))
            except ValidationError:
                continue
        return out
