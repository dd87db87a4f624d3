"""FastAPI dependencies for the recap endpoints."""

from __future__ import annotations

from fastapi import Request

from src.recap.config import get_settings
from src.recap.pipeline.recap import RecapPipeline, build_pipeline


def get_recap_pipeline(request: Request) -> RecapPipeline:
    """Return the app's RecapPipeline, building it on first use.

    Building checks the credential and assistant id, so a missing secret
    fails this request with a ConfigurationError before anything is sent
    upstream, and the next request checks again.
    """
    pipeline = getattr(request.app.state, "recap_pipeline", None)
    if pipeline is None:
        pipeline = build_pipeline(get_settings())
        request.app.state.recap_pipeline = pipeline
    return pipeline
