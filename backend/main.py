import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings
from db.database import init_db
from api.routes import admin, converters, encoding, events, json_tools, markdown, password, qrcode, regex

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Developer Tools Hub API")

    if not settings.admin_dashboard_password:
        logger.warning(
            "ADMIN_DASHBOARD_PASSWORD is not set! Admin login is disabled "
            "and the analytics summary cannot be viewed."
        )
    if not settings.admin_session_secret:
        logger.warning(
            "ADMIN_SESSION_SECRET is not set. Using a random per-process key, "
            "so admin sessions end on restart and are not shared between workers. "
            "Generate one with: openssl rand -hex 32"
        )

    await init_db()
    yield
    logger.info("Shutting down Developer Tools Hub API")


app = FastAPI(
    title="Developer Tools Hub",
    description="Regex, password, Markdown and conversion tools with anonymous usage analytics",
    version="0.1.0",
    lifespan=lifespan,
)

cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)

app.include_router(regex.router, prefix="/api/regex", tags=["regex"])
app.include_router(password.router, prefix="/api/password", tags=["password"])
app.include_router(markdown.router, prefix="/api/markdown", tags=["markdown"])
app.include_router(converters.router, prefix="/api/convert", tags=["converters"])
app.include_router(encoding.router, prefix="/api/encoding", tags=["encoding"])
app.include_router(json_tools.router, prefix="/api/json", tags=["json"])
app.include_router(qrcode.router, prefix="/api/qrcode", tags=["qrcode"])
app.include_router(events.router, prefix="/api/events", tags=["analytics"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


@app.get("/api/health")
async def health():
    return {"status": "ok"}
