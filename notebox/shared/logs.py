import logging

from notebox.shared.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

def configure_logging(level: str | None = None) -> None:
    """Attach one stream handler to the `notebox` logger tree (idempotent)."""
    root = logging.getLogger("notebox")
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if not any(getattr(h, "_notebox", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._notebox = True  # type: ignore[attr-defined]
        root.addHandler(handler)
