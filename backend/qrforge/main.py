from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import os

# -------------------------------------------------------
# ⚙️ Core Imports
# -------------------------------------------------------
from .core.config import settings
from .core.db import Base, engine, db_healthcheck
from .core.errors import QRForgeError, ValidationError
from .core.log import get_logger, setup_logging
from .core.storage import PUBLIC_PREFIX
from .models import history as _history_model  # noqa: F401  (registers the table)

# -------------------------------------------------------
# 🧩 Routers
# -------------------------------------------------------
from .routers import history, qr

VERSION = "1.0.0"

setup_logging(settings.LOG_LEVEL)
log = get_logger("main")

# -------------------------------------------------------
# 🚀 FastAPI Initialization
# -------------------------------------------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=VERSION,
    debug=settings.DEBUG,
    description="QR Forge – QR generation with logo overlay, history and PNG/SVG/PDF export",
)

# -------------------------------------------------------
# 🗂️ Stored QR images
# -------------------------------------------------------
QR_SAVE_DIR = settings.QR_SAVE_DIR
os.makedirs(QR_SAVE_DIR, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=QR_SAVE_DIR), name="qr-images")

# -------------------------------------------------------
# 🌐 CORS Middleware
# -------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------------------------------
# ❗ Error Handlers  →  {"error": "..."}
# -------------------------------------------------------
@app.exception_handler(QRForgeError)
def handle_qrforge_error(request: Request, exc: QRForgeError):
    if isinstance(exc, ValidationError):
        log.info("[400] %s %s: %s", request.method, request.url.path, exc.message)
    else:
        log.error("[%d] %s %s: %s", exc.status_code, request.method, request.url.path, exc.message,
                  exc_info=exc)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
        message = f"{field}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse({"error": message}, status_code=400)

# -------------------------------------------------------
# 🏁 Startup Events
# -------------------------------------------------------
@app.on_event("startup")
def on_startup():
    """Create tables and report the environment."""
    Base.metadata.create_all(bind=engine)
    log.info("✅ Database models created.")
    log.info("📦 QR image dir: %s", QR_SAVE_DIR)
    log.info("🌍 Public base URL: %s", settings.PUBLIC_BASE_URL)

# -------------------------------------------------------
# ❤️ Health Checks
# -------------------------------------------------------
@app.get("/health", tags=["Health"])
def health():
    return {
        "status": "ok",
        "service": settings.PROJECT_NAME,
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health/db", tags=["Health"])
def health_db():
    ok, error = db_healthcheck()
    return {"database": "ok" if ok else "error", "error": error}

# -------------------------------------------------------
# 🔗 Router Registration (bare paths + /api prefix)
# -------------------------------------------------------
for _router in (qr.router, history.router):
    app.include_router(_router)
    app.include_router(_router, prefix="/api")
