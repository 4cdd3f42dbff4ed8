#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
System endpoints.

GET /api/v1/version: MathJax version in use (cached for an hour)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from wikimath.schemas import VersionResponse
from wikimath.services.pipeline import MathPipeline, get_pipeline


# -----------------------------------------------------------------------------

router = APIRouter(tags=["system"])


# -----------------------------------------------------------------------------

@router.get("/version", response_model=VersionResponse)
async def mathjax_version(pipeline: MathPipeline = Depends(get_pipeline)):
    version = await run_in_threadpool(pipeline.version)
    return VersionResponse(version=version, engine=pipeline.engine.name)


# -----------------------------------------------------------------------------
