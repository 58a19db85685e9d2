import json

from paintbill.models.line_item import LineItem
from paintbill.services.invoice_service import InvoiceService
from paintbill.settings import AppSettings, load_settings
from paintbill.storage.json_repo import JsonRepository
from paintbill.storage.repo import MemoryRepository


def make_service(repo=None):
    return InvoiceService(repo or MemoryRepository(), settings=AppSettings())


def test_end_to_end_wall_paint(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    service = make_service()
    draft = service.new_draft()
    assert draft.number == "001"

    item = LineItem.create("Wall Paint", "Sq.ft", 15)
    draft.add_item(item)
    draft.update_item(item.id, "quantity", 100)
    assert (draft.items[0].amount, draft.subtotal, draft.total, draft.balance) == (1500, 1500, 1500, 1500)
    draft.set_discount(100)
    assert (draft.total, draft.balance) == (1400, 1400)
    draft.set_advance(1400)
    assert draft.balance == 0

    service.save(draft)
    invoices = service.list_invoices()
    assert len(invoices) == 1
    saved = invoices[0]
    assert saved.id == draft.id
    assert (saved.subtotal, saved.discount, saved.total, saved.advance, saved.balance) == (1500, 100, 1400, 1400, 0)
    assert saved.status == "Pending"


def test_reopen_edit_and_resave_preserves_identity(tmp_path):
    path = tmp_path / "invoices.json"
    service = make_service(JsonRepository(path))
    draft = service.new_draft()
    draft.client.name = "Kale"
    draft.add_item(LineItem.create("Putty", "Sq.ft", 12))
    service.save(draft)

    again = service.open_for_edit(draft.id)
    again.set_advance(5)
    assert service.list_invoices()[0].advance == 0
    service.save(again)

    fresh = make_service(JsonRepository(path))
    invoices = fresh.list_invoices()
    assert len(invoices) == 1
    assert invoices[0].id == draft.id
    assert invoices[0].balance == 7
    assert fresh.new_draft().number == "002"


def test_open_unknown_invoice_returns_none():
    assert make_service().open_for_edit("missing") is None


def test_client_stats_and_dashboard():
    service = make_service()
    for name, rate, adv in (("Jadhav", 100, 50), ("Jadhav", 40, 0), ("", 10, 10)):
        draft = service.new_draft()
        draft.client.name = name
        draft.add_item(LineItem.create("Work", "Lump", rate))
        draft.set_advance(adv)
        service.save(draft)

    stats = service.client_stats()
    assert [(c.name, c.count, c.total) for c in stats] == [("Jadhav", 2, 140)]
    dash = service.dashboard()
    assert dash.total_revenue == 60
    assert dash.pending_amount == 90
    assert dash.invoices_count == 3


def test_settings_file_is_optional_and_tolerant(tmp_path):
    assert load_settings(tmp_path / "missing.json").company.name
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    assert load_settings(bad).default_unit == "Sq.ft"
    good = tmp_path / "settings.json"
    good.write_text(json.dumps({"company": {"name": "Shree Painters"}, "default_unit": "Nos", "legacy": 1}), encoding="utf-8")
    s = load_settings(good)
    assert s.company.name == "Shree Painters"
    assert s.default_unit == "Nos"


def test_data_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PAINTBILL_DATA_DIR", str(tmp_path))
    service = InvoiceService(settings=AppSettings())
    draft = service.new_draft()
    service.save(draft)
    assert (tmp_path / "invoices.json").exists()


def test_wkhtmltopdf_lookup_order(tmp_path, monkeypatch):
    from paintbill.settings import resolve_wkhtmltopdf

    env_bin = tmp_path / "env-wkhtmltopdf"
    conf_bin = tmp_path / "conf-wkhtmltopdf"
    env_bin.write_text("")
    conf_bin.write_text("")
    monkeypatch.delenv("WKHTMLTOPDF", raising=False)
    monkeypatch.delenv("WKHTMLTOPDF_CMD", raising=False)
    monkeypatch.setattr("shutil.which", lambda name: None)

    settings = AppSettings()
    assert resolve_wkhtmltopdf(settings) is None

    settings.pdf.wkhtmltopdf_path = f'"{conf_bin}"'
    assert resolve_wkhtmltopdf(settings) == str(conf_bin)

    monkeypatch.setenv("WKHTMLTOPDF_CMD", str(env_bin))
    assert resolve_wkhtmltopdf(settings) == str(env_bin)

    monkeypatch.setenv("WKHTMLTOPDF", str(tmp_path / "missing"))
    assert resolve_wkhtmltopdf(settings) == str(env_bin)
