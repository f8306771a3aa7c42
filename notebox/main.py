import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi

from notebox.shared.config import settings
from notebox.shared.db import Base, engine
from notebox.shared.logs import configure_logging
from notebox.shared.http import invalid_input_handler

# import models so they register with Base.metadata
from notebox.auth import models as auth_models  # noqa: F401
from notebox.notes import models as notes_models  # noqa: F401

# Routers Import
from notebox.auth.api import router as auth_router
from notebox.notes.api import router as notes_router

TAGS_METADATA = [
    {"name": "Auth", "description": "Register, sign in, inspect the current user"},
    {"name": "Notes", "description": "Create, edit, list, delete and summarize notes"},
    {"name": "Health", "description": "Service health"},
]

configure_logging()
logger = logging.getLogger("notebox.api")

app = FastAPI(
    title="Notebox",
    version="0.1.0",
    description="Personal notes with extractive summaries.",
    openapi_tags=TAGS_METADATA,
)

app.add_exception_handler(RequestValidationError, invalid_input_handler)

# ---- DEV-ONLY error handler (surfaces real errors in Swagger) ----
if settings.ENV == "dev":
    @app.exception_handler(Exception)
    async def _dev_ex_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.on_event("startup")
def _init_db():
    Base.metadata.create_all(bind=engine)

@app.get("/healthz", tags=["Health"])
def healthz():
    return {"ok": True}

# --- Custom OpenAPI: bearerAuth as the default scheme ---
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schema["components"]["securitySchemes"]["bearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    # every op except the public ones
    for path, ops in schema.get("paths", {}).items():
        if path in ["/auth/token", "/auth/register", "/healthz"]:
            continue
        for op in ops.values():
            op.setdefault("security", [{"bearerAuth": []}])
    app.openapi_schema = schema
    return app.openapi_schema

# Routers
app.include_router(auth_router)
app.include_router(notes_router)

app.openapi = custom_openapi
