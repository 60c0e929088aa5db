from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..context import AppContext, UnknownResource, ViewState, register_context
from ..orchestrator import start_session
from ..results import Failure
from ..schemas import ArticleAnalysisResult, FiveW1H, IncomingResource, PodcastCorrectionResult, VocabularyItem
from ..services.feed import FeedStore
from ..services.podcast import youtube_embed_url
from .common import get_feed_store, require_context


router = APIRouter(prefix="/session", tags=["session"])

MANUAL_VIEWS = (ViewState.ARTICLE_ANALYZER, ViewState.PODCAST_PRACTICE)


class FailureOut(BaseModel):
    reason: str
    message: str


class ArticleState(BaseModel):
    input_text: str
    result: Optional[ArticleAnalysisResult] = None
    last_failure: Optional[FailureOut] = None


class PodcastState(BaseModel):
    video_url: str
    embed_url: Optional[str] = None
    topic: str
    inputs: FiveW1H
    feedback: Optional[PodcastCorrectionResult] = None
    last_failure: Optional[FailureOut] = None


class VocabularyState(BaseModel):
    items: List[VocabularyItem]
    pending_count: int


class SessionSnapshot(BaseModel):
    session_id: str
    current_view: ViewState
    resources: List[IncomingResource]
    active_resource: Optional[IncomingResource] = None
    article: ArticleState
    podcast: PodcastState
    vocabulary: VocabularyState
    busy: List[str]


class ViewRequest(BaseModel):
    view: ViewState


class DraftRequest(BaseModel):
    article_text: Optional[str] = None
    topic: Optional[str] = None
    video_url: Optional[str] = None
    inputs: Optional[FiveW1H] = None


def _failure_out(failure: Optional[Failure]) -> Optional[FailureOut]:
    if failure is None:
        return None
    return FailureOut(reason=failure.reason.value, message=failure.message)


def snapshot(ctx: AppContext) -> SessionSnapshot:
    return SessionSnapshot(
        session_id=ctx.session_id,
        current_view=ctx.current_view,
        resources=ctx.resources,
        active_resource=ctx.active_resource,
        article=ArticleState(
            input_text=ctx.article.input_text,
            result=ctx.article.result,
            last_failure=_failure_out(ctx.article.last_failure),
        ),
        podcast=PodcastState(
            video_url=ctx.podcast.video_url,
            embed_url=youtube_embed_url(ctx.podcast.video_url),
            topic=ctx.podcast.topic,
            inputs=ctx.podcast.inputs,
            feedback=ctx.podcast.feedback,
            last_failure=_failure_out(ctx.podcast.last_failure),
        ),
        vocabulary=VocabularyState(
            items=ctx.vocabulary.items,
            pending_count=len(ctx.vocabulary.pending()),
        ),
        busy=ctx.busy_operations,
    )


# Plain def: the row-store read is blocking and runs in the threadpool
@router.post("", response_model=SessionSnapshot, status_code=201)
def create_session(store: FeedStore = Depends(get_feed_store)):
    ctx = register_context(start_session(store))
    return snapshot(ctx)


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str):
    return snapshot(require_context(session_id))


@router.post("/{session_id}/view", response_model=SessionSnapshot)
async def change_view(session_id: str, req: ViewRequest):
    ctx = require_context(session_id)
    ctx.touch()
    ctx.change_view(req.view)
    return snapshot(ctx)


@router.post("/{session_id}/manual", response_model=SessionSnapshot)
async def open_manual(session_id: str, req: ViewRequest):
    ctx = require_context(session_id)
    if req.view not in MANUAL_VIEWS:
        raise HTTPException(status_code=400, detail="manual entry is only available for article_analyzer and podcast_practice")
    ctx.touch()
    ctx.open_manual(req.view)
    return snapshot(ctx)


@router.post("/{session_id}/resources/{resource_id}/process", response_model=SessionSnapshot)
async def process_resource(session_id: str, resource_id: str):
    ctx = require_context(session_id)
    ctx.touch()
    try:
        ctx.process_resource(resource_id)
    except UnknownResource:
        raise HTTPException(status_code=404, detail="Resource not found in this session's feed")
    return snapshot(ctx)


@router.post("/{session_id}/draft", response_model=SessionSnapshot)
async def update_drafts(session_id: str, req: DraftRequest):
    ctx = require_context(session_id)
    ctx.touch()
    ctx.update_drafts(
        article_text=req.article_text,
        topic=req.topic,
        video_url=req.video_url,
        inputs=req.inputs,
    )
    return snapshot(ctx)
