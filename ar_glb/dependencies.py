import httpx
from fastapi import Request

from ar_glb.services.ar_scaling_service import ARScalingService
from ar_glb.services.scaling_cache import InMemoryScalingCache


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_ar_scaling_service(request: Request) -> ARScalingService:
    return request.app.state.ar_scaling_service


def get_scaling_cache(request: Request) -> InMemoryScalingCache:
    return request.app.state.scaling_cache
