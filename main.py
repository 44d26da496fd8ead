import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from config import settings
from api.v1.router import api_router
from core.persistence import KeyValueStore
from core.session import OnboardingSession
from services.db import SqlKeyValueStore, init_db

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOG = logging.getLogger(__name__)


def create_app(
    store: KeyValueStore | None = None,
    loading_interval: float | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        kv = store
        if kv is None:
            await init_db()
            kv = SqlKeyValueStore()
        session = OnboardingSession(kv, loading_interval=loading_interval)
        await session.load()
        app.state.session = session
        _LOG.info("onboarding session ready (%s)", session.state.current_view.value)
        try:
            yield
        finally:
            await session.close()

    app = FastAPI(title="FitnessJunkie Onboarding API", version="1.0.0", lifespan=lifespan)

    # CORS (public demo only – lock down in prod)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.env_name}

    return app


app = create_app()
