"""FastAPI application exposing host resource usage."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .errors import SamplerPoisonedError
from .models import ServerStats
from .sampler import StatsSampler

logger = logging.getLogger(__name__)


def get_sampler(request: Request) -> StatsSampler:
    return request.app.state.sampler


def create_app(sampler: Optional[StatsSampler] = None) -> FastAPI:
    app = FastAPI(
        title="Host Stats Service",
        description="Reports live CPU, memory and disk usage of the host.",
        version="0.1.0",
    )
    app.state.sampler = sampler if sampler is not None else StatsSampler()

    @app.exception_handler(SamplerPoisonedError)
    async def sampler_poisoned(request: Request, exc: SamplerPoisonedError):
        logger.error("Cannot serve %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/stats", response_model=ServerStats, summary="Return current host resource usage", tags=["stats"])
    def server_stats(stats_sampler: StatsSampler = Depends(get_sampler)) -> ServerStats:
        return stats_sampler.snapshot()

    return app
