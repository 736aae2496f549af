# sana/main.py
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, settings as default_settings
from .routers import environment, survey
from .services.aggregation import Aggregator
from .services.location import LocationSource
from .services.quality_client import QualityClient

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.quality_api_key:
            logger.warning("QUALITY_API_KEY not set; provider requests will be sent without a key")
        location = LocationSource()
        aggregator = Aggregator(
            QualityClient(settings, client=http_client),
            cancel_superseded=settings.cancel_superseded,
        )
        follower = asyncio.create_task(aggregator.follow(location), name="location-follower")
        app.state.location = location
        app.state.aggregator = aggregator
        try:
            yield
        finally:
            follower.cancel()
            await asyncio.gather(follower, return_exceptions=True)
            await aggregator.aclose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(environment.router)
    app.include_router(survey.router)

    @app.get("/")
    def root():
        return {"name": settings.app_name, "env": settings.app_env, "message": "OK"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
