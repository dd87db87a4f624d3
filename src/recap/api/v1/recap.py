"""Recap endpoint.

``POST /recap`` turns a transcript into markdown notes and, in
``notes+audio`` mode, a base64 MP3 voiceover. Failures are rendered by the
app-level RecapError handler as ``{"error": ...}`` with 400 or 500.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.recap.api.deps import get_recap_pipeline
from src.recap.pipeline.recap import RecapPipeline
from src.recap.schemas import RecapRequest, RecapResponse

router = APIRouter(tags=["recap"])


@router.post("/recap", response_model=RecapResponse)
async def create_recap(
    body: RecapRequest,
    pipeline: RecapPipeline = Depends(get_recap_pipeline),
) -> RecapResponse:
    """Generate a recap for one transcript.

    Creates a new remote session per call; nothing is stored server-side.
    """
    return await pipeline.generate(body)
