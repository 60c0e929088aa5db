from pathlib import Path

from fastapi import FastAPI

from .db import Base, engine
from .cleanup import purge_idle_sessions
from fastapi.staticfiles import StaticFiles
from fastapi.responses import RedirectResponse
from .settings import settings
from .routers import session
from .routers import article
from .routers import podcast
from .routers import vocabulary
from . import models  # noqa: F401  registers IncomingResourceRow on Base.metadata
import asyncio
import logging

BASE_DIR = Path(__file__).resolve().parents[2]
FRONTEND_DIR = BASE_DIR / "frontend"

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

app = FastAPI(title="Intelligent Recall API")
app.include_router(session.router)
app.include_router(article.router)
app.include_router(podcast.router)
app.include_router(vocabulary.router)

# Static frontend at /app (use absolute paths so cwd doesn't matter when launching)
if FRONTEND_DIR.is_dir():
	app.mount("/app", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")

@app.get("/", include_in_schema=False)
async def redirect_root_to_app():
	return RedirectResponse(url="/app")

@app.get("/info")
def root():
	return {
		"status": "ok",
		"gemini_configured": bool(settings.gemini_api_key),
		"feed_backend": settings.feed_backend,
		"supabase_configured": settings.supabase_configured,
	}

async def _cleanup_watcher():
	while True:
		await asyncio.sleep(60 * 60)
		try:
			purge_idle_sessions()
		except Exception:
			logger.exception("Idle session purge failed")

@app.on_event("startup")
async def startup_event():
	# The SQL feed backend reads a local table; make sure it exists
	if settings.feed_backend.lower() == "sql":
		Base.metadata.create_all(bind=engine)
	app.state.cleanup_task = asyncio.create_task(_cleanup_watcher())

@app.on_event("shutdown")
async def shutdown_event():
	task = getattr(app.state, "cleanup_task", None)
	if task is not None:
		task.cancel()
