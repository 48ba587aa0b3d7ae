from __future__ import annotations  # FastAPI server exposing the session trainer

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from services.sessions import clear_sessions


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:  # Drop open sessions on shutdown
    yield
    logger.info("Closing open trainer sessions")
    clear_sessions()


def create_app() -> FastAPI:  # Build the application with the session router mounted
    application = FastAPI(title="Session Trainer API", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"]
    )
    application.include_router(router)

    @application.get("/healthz")
    def healthz() -> dict:  # Liveness probe
        return {"status": "ok"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_server:app", host="0.0.0.0", port=8000, reload=False)
