from __future__ import annotations

"""
FastAPI front door for the movie resolver.

- POST /api/search       movie name -> resolved record
- GET  /api/candidates   movie name -> raw candidate list
- GET  /api/image-proxy  poster bytes fetched with a catalog Referer
- GET  /health

Resolver errors map to statuses via ResolverError.http_status
(no results 404, bad input 400, network 503, parse 502).
"""

from pathlib import PurePosixPath
from urllib.parse import urlparse

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger

from ._singletons import get_resolver
from .config import (
    APP_NAME,
    APP_VERSION,
    IMAGE_CACHE_SECONDS,
    IMAGE_REFERER,
    CandidateItem,
    CandidatesResponse,
    HealthResponse,
    SearchRequest,
    SearchResponse,
)
from .errors import ResolverError
from .pipeline import MovieResolver
from .utils.urls import is_fetchable_url


app = FastAPI(title=APP_NAME, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def _error_response(exc: ResolverError) -> JSONResponse:
    body = SearchResponse(success=False, error=exc.message)
    return JSONResponse(status_code=exc.http_status, content=body.model_dump())


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/api/search", response_model=SearchResponse)
def search(req: SearchRequest, resolver: MovieResolver = Depends(get_resolver)):
    name = req.movieName.strip()
    if not name:
        return JSONResponse(
            status_code=400,
            content=SearchResponse(success=False, error="movieName must be non-empty").model_dump(),
        )
    logger.info("API search: {}", name)
    try:
        record = resolver.resolve(name)
    except ResolverError as e:
        logger.warning("API search failed: {}", e)
        return _error_response(e)
    return SearchResponse(success=True, data=record)


@app.get("/api/candidates", response_model=CandidatesResponse)
def candidates(q: str = Query(""), resolver: MovieResolver = Depends(get_resolver)):
    try:
        found = resolver.resolve_candidates(q)
    except ResolverError as e:
        raise HTTPException(status_code=e.http_status, detail=e.message)
    return CandidatesResponse(
        query=q.strip(),
        candidates=[CandidateItem(**c.to_dict()) for c in found],
    )


@app.get("/api/image-proxy")
def image_proxy(url: str = Query(""), resolver: MovieResolver = Depends(get_resolver)):
    if not url.strip():
        raise HTTPException(status_code=400, detail="Missing image url")
    if not is_fetchable_url(url.strip()):
        raise HTTPException(status_code=400, detail="Image url must be absolute http(s)")
    try:
        r = resolver.fetcher.fetch(url.strip(), headers={"Referer": IMAGE_REFERER})
    except ResolverError as e:
        logger.warning("Image proxy failed for {}: {}", url, e)
        raise HTTPException(status_code=502, detail="Image fetch failed")

    content_type = r.headers.get("content-type", "image/jpeg")
    if "webp" in content_type:
        content_type = "image/jpeg"
    filename = PurePosixPath(urlparse(url).path).name or "image"
    if filename.lower().endswith(".webp"):
        filename = filename[:-5] + ".jpg"

    return Response(
        content=r.content,
        media_type=content_type,
        headers={
            "Cache-Control": f"public, max-age={IMAGE_CACHE_SECONDS}",
            "Content-Disposition": f'inline; filename="{filename}"',
        },
    )
