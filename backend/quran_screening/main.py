from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI

from .quran_client import QuranClient
from .session import SessionRegistry
from .settings import settings
from .routers import auth
from .routers import screening
from .routers import reading

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(quran_client: Optional[QuranClient] = None) -> FastAPI:
	@asynccontextmanager
	async def lifespan(app: FastAPI):
		app.state.quran_client = quran_client or QuranClient()
		app.state.sessions = SessionRegistry()
		logger.info("Reading material from %s", app.state.quran_client.base_url)
		try:
			yield
		finally:
			await app.state.sessions.clear()
			await app.state.quran_client.aclose()

	app = FastAPI(title="Qur'an Screening API", lifespan=lifespan)
	app.include_router(auth.router)
	app.include_router(screening.router)
	app.include_router(reading.router)

	@app.get("/info")
	def root():
		return {"status": "ok", "quran_api": settings.quran_api_base_url, "locale": settings.screening_locale}

	return app


app = create_app()
