from fastapi.testclient import TestClient
from notebox.main import app

def test_health():
    c = TestClient(app)
    r = c.get("/healthz")
    assert r.status_code == 200 and r.json()["ok"] is True

def test_configure_logging_is_idempotent():
    import logging
    from notebox.shared.logs import configure_logging

    configure_logging("debug")
    configure_logging("debug")
    log = logging.getLogger("notebox")
    assert log.level == logging.DEBUG
    assert sum(getattr(h, "_notebox", False) for h in log.handlers) == 1
