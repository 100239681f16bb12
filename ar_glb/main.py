from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ar_glb.config import settings
from ar_glb.logging_config import setup_logging
from ar_glb.routers import ar_scaling, glb, health, proxy
from ar_glb.services.ar_scaling_service import ARScalingService
from ar_glb.services.scaling_cache import InMemoryScalingCache


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)

    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.FETCH_TIMEOUT_SECONDS),
        headers={"User-Agent": settings.USER_AGENT},
        follow_redirects=True,
    )
    cache = InMemoryScalingCache(
        ttl_seconds=settings.AR_CACHE_TTL_SECONDS,
        sweep_threshold=settings.AR_CACHE_SWEEP_THRESHOLD,
    )
    app.state.http_client = http_client
    app.state.scaling_cache = cache
    app.state.ar_scaling_service = ARScalingService(
        http_client=http_client,
        cache=cache,
        default_max_dimension=settings.AR_MAX_DIMENSION_METERS,
        max_dimension_limit=settings.AR_MAX_DIMENSION_LIMIT,
    )
    try:
        yield
    finally:
        await http_client.aclose()


app = FastAPI(title="AR GLB Backend", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=glb.SCALING_HEADERS,
)

app.include_router(health.router, prefix="/api")
app.include_router(glb.router, prefix="/api")
app.include_router(ar_scaling.router, prefix="/api")
app.include_router(proxy.router, prefix="/api")
