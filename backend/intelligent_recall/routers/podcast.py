from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..orchestrator import run_podcast_review
from ..schemas import FiveW1H, PodcastCorrectionResult
from ..services.common import ClientFactory
from ..services.podcast import youtube_embed_url, youtube_id
from .common import get_client_factory, require_context, unwrap


router = APIRouter(prefix="/podcast", tags=["podcast"])


class ReviewRequest(BaseModel):
    session_id: str
    topic: str = ""
    video_url: Optional[str] = None
    inputs: FiveW1H = Field(default_factory=FiveW1H)


class EmbedResponse(BaseModel):
    video_id: Optional[str] = None
    embed_url: Optional[str] = None


@router.post("/review", response_model=PodcastCorrectionResult)
async def review(req: ReviewRequest, client_factory: ClientFactory = Depends(get_client_factory)):
    ctx = require_context(req.session_id)
    result = await run_podcast_review(
        ctx,
        req.topic,
        req.inputs,
        video_url=req.video_url,
        client_factory=client_factory,
    )
    return unwrap(result)


@router.get("/embed", response_model=EmbedResponse)
async def embed(url: str = ""):
    return EmbedResponse(video_id=youtube_id(url), embed_url=youtube_embed_url(url))
