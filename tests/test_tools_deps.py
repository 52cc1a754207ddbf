from pathlib import Path
from see_code.config import load_settings
from see_code.tools.deps import check_all, format_report, has_module, DepStatus

CONFIG = Path(__file__).resolve().parents[1] / "config"

def test_check_all_with_writable_dirs(tmp_path: Path):
    s = load_settings(config=str(CONFIG), profile="portrait")
    s.transport.socket_path = str(tmp_path / "sock")
    s.general.log_dir = str(tmp_path / "a" / "b" / "logs")
    statuses = {st.name: st for st in check_all(s)}
    assert statuses["python"].ok
    assert statuses["socket"].ok
    assert statuses["logs"].ok
    assert statuses["fastapi"].ok == has_module("fastapi")

def test_missing_socket_dir_is_reported(tmp_path: Path):
    s = load_settings(config=str(CONFIG), profile="portrait")
    s.transport.socket_path = str(tmp_path / "missing" / "sock")
    st = {x.name: x for x in check_all(s)}["socket"]
    assert st.ok is False
    s.transport.socket_enabled = False
    assert {x.name: x for x in check_all(s)}["socket"].ok is True

def test_format_report():
    ok = format_report([DepStatus("python", True, "3.12")])
    assert ok.startswith("=== Dépendances ===")
    assert ok.endswith("Tout est en place.")
    ko = format_report([DepStatus("python", True, "3.12"), DepStatus("jinja2", False, "manquant")])
    assert "[KO] jinja2" in ko
    assert ko.endswith("1 problème(s) détecté(s).")
