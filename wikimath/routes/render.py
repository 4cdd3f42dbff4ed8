#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoint: wikitext with math in, MathJax-ready HTML out.

GET  /api/v1/render?text=...&title=...&namespace=0&lang=en
POST /api/v1/render   {"text": "...", "title": "...", "namespace": 0, "lang": "en"}
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from wikimath.schemas import RenderRequest, RenderResponse
from wikimath.services.namespaces import NS_MAIN, Page
from wikimath.services.pipeline import MathPipeline, get_pipeline


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

async def _render(pipeline: MathPipeline, req: RenderRequest) -> RenderResponse:
    # Engines may block on a subprocess or an HTTP call.
    out = await run_in_threadpool(
        pipeline.render_page, Page(title=req.title, namespace=req.namespace), req.text, req.lang
    )
    return RenderResponse(html=out.body, **{k: v for k, v in asdict(out).items() if k != "body"})


@router.get("", response_model=RenderResponse)
async def render_get(
    text:      str = Query(default="", max_length=1_000_000),
    title:     str = Query(default="Main Page", max_length=255),
    namespace: int = Query(default=NS_MAIN),
    lang:      str | None = Query(default=None, max_length=35, pattern=r"^[A-Za-z0-9-]*$"),
    pipeline:  MathPipeline = Depends(get_pipeline),
):
    """Render a snippet of wikitext, used by the live editor preview."""
    return await _render(pipeline, RenderRequest(text=text, title=title, namespace=namespace, lang=lang))


@router.post("", response_model=RenderResponse)
async def render_post(
    req:      RenderRequest,
    pipeline: MathPipeline = Depends(get_pipeline),
):
    """Render a whole page of wikitext."""
    return await _render(pipeline, req)


# -----------------------------------------------------------------------------
