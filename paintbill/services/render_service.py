# paintbill/services/render_service.py
from __future__ import annotations
import logging
import os
import re
from pathlib import Path
from typing import Optional

import pdfkit  # utilisé si wkhtmltopdf dispo
from jinja2 import Environment, FileSystemLoader, select_autoescape

from paintbill.models.invoice import Invoice
from paintbill.services.amount_words import format_inr, words_for
from paintbill.settings import TEMPLATES_DIR, AppSettings, load_settings, resolve_wkhtmltopdf

log = logging.getLogger(__name__)

MIN_ROWS = 6
PDF_OPTIONS = {
    "enable-local-file-access": None,
    "quiet": "",
    "encoding": "UTF-8",
    "page-size": "A4",
}

# ---------- Formats ----------
def _slug(text: str) -> str:
    text = (text or "").strip()
    text = re.sub(r'[\\/:*?"<>|\n\r\t]', "_", text)
    text = re.sub(r"\s+", "_", text)
    return text or "Invoice"

def _fmt_qty(q: float) -> str:
    return str(int(q)) if float(q).is_integer() else f"{q:g}"


# ---------- Service ----------
class RenderService:
    """
    Rendu du document imprimable. Lit les champs dérivés tels quels,
    ne recalcule jamais subtotal / total / balance.
    """

    def __init__(self, settings: Optional[AppSettings] = None, templates_dir: Path = TEMPLATES_DIR):
        self.settings = settings or load_settings()
        self.templates_dir = Path(templates_dir)
        self.stylesheet = self.templates_dir / "stylesheet.css"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self.env.filters["inr"] = format_inr
        self.env.filters["qty"] = _fmt_qty

    def context(self, inv: Invoice) -> dict:
        return {
            "invoice": inv,
            "company": self.settings.company,
            "empty_rows": max(0, MIN_ROWS - len(inv.items)),
            "total_in_words": words_for(inv.total),
        }

    def render_html(self, inv: Invoice) -> str:
        tpl = self.env.get_template("invoice.html")
        return tpl.render(**self.context(inv))

    def pdf_filename(self, inv: Invoice) -> str:
        return f"Invoice_{_slug(inv.number or inv.id)}.pdf"

    # ---------- PDF ----------
    def _write_with_wkhtmltopdf(self, html: str, out_path: Path, binary: str) -> None:
        config = pdfkit.configuration(wkhtmltopdf=binary)
        pdfkit.from_string(
            html, str(out_path), options=PDF_OPTIONS, configuration=config, css=str(self.stylesheet.resolve())
        )

    def _write_with_weasyprint(self, html: str, out_path: Path) -> None:
        try:
            from weasyprint import HTML, CSS
        except ImportError as e:
            raise RuntimeError(
                "wkhtmltopdf introuvable et WeasyPrint non installé "
                "(pip install 'paint-invoice[pdf]' ou configurer pdf.wkhtmltopdf_path)"
            ) from e
        styles = [CSS(filename=str(self.stylesheet))] if self.stylesheet.exists() else None
        doc = HTML(string=html, base_url=str(self.templates_dir.resolve()))
        doc.write_pdf(str(out_path), stylesheets=styles)

    def export_pdf(self, inv: Invoice, out_dir: os.PathLike | str) -> str:
        """
        Génère le PDF de facture.
        Essaie wkhtmltopdf (pdfkit) en priorité, sinon WeasyPrint.
        """
        html = self.render_html(inv)
        exports_dir = Path(out_dir)
        exports_dir.mkdir(parents=True, exist_ok=True)
        out_path = exports_dir / self.pdf_filename(inv)

        binary = resolve_wkhtmltopdf(self.settings)
        if binary:
            try:
                self._write_with_wkhtmltopdf(html, out_path, binary)
                log.info("PDF exporté: %s", out_path)
                return str(out_path)
            except OSError as e:
                log.warning("Échec wkhtmltopdf (%s), bascule sur WeasyPrint", e)

        self._write_with_weasyprint(html, out_path)
        log.info("PDF exporté (WeasyPrint): %s", out_path)
        return str(out_path)
