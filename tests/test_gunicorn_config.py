import runpy
from pathlib import Path

CONFIG = Path(__file__).resolve().parent.parent / "gunicorn.conf.py"


def test_single_worker_by_default(monkeypatch):
    monkeypatch.delenv("WEB_CONCURRENCY", raising=False)

    config = runpy.run_path(str(CONFIG))

    assert config["workers"] == 1
    assert config["wsgi_app"] == "villa_admin.main:app"


def test_worker_count_from_environment(monkeypatch):
    monkeypatch.setenv("WEB_CONCURRENCY", "3")

    assert runpy.run_path(str(CONFIG))["workers"] == 3
