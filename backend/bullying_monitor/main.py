import logging

from fastapi import FastAPI

from .db import init_schema
from .settings import settings
from .routers import health, auth, survey, admin

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Bullying Monitor API")
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(survey.router)
app.include_router(admin.router)


@app.get("/info")
def root():
	configured = bool(settings.openrouter_api_key if settings.llm_provider == "openrouter" else settings.gemini_api_key)
	return {"status": "ok", "llm_provider": settings.llm_provider, "llm_configured": configured}


@app.on_event("startup")
async def startup_event():
	init_schema()
	if not (settings.admin_password or settings.admin_password_hash):
		logger.warning("ADMIN_PASSWORD is not set; admin endpoints will reject every login")
