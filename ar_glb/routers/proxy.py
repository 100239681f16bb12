import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from ar_glb.config import settings
from ar_glb.dependencies import get_http_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/proxy", response_class=Response)
async def proxy(
    url: str | None = Query(None),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Forward a GET to the archive API so the browser avoids CORS."""
    if not url:
        raise HTTPException(status_code=400, detail="Missing url parameter")

    if not any(url.startswith(prefix) for prefix in settings.PROXY_ALLOWED_PREFIXES):
        raise HTTPException(status_code=403, detail="Only archive URLs are allowed")

    try:
        upstream = await client.get(url, follow_redirects=False)
    except httpx.HTTPError as exc:
        logger.error("Proxy error for %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=f"Proxy error: {exc}")

    if upstream.is_redirect:
        # Redirect targets are not checked against the allow-list
        logger.warning("Proxy refused redirect from %s", url)
        raise HTTPException(status_code=502, detail="Upstream redirected outside the proxy")

    if not upstream.is_success:
        raise HTTPException(
            status_code=upstream.status_code,
            detail=f"Failed to fetch: {upstream.status_code}",
        )

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
        headers={"Cache-Control": "public, max-age=3600"},
    )
