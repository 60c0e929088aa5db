from __future__ import annotations

import logging
from typing import Optional

from .context import AppContext, OperationInProgress
from .results import Failure, FailureReason, Result, Success
from .schemas import ArticleAnalysisResult, FiveW1H, PodcastCorrectionResult, VocabularyEntry, VocabularyItem
from .services.article import analyze_article
from .services.common import ClientFactory
from .services.feed import FeedStore, load_resources
from .services.podcast import review_podcast_summary
from .gemini_client import GeminiClient


logger = logging.getLogger(__name__)

ARTICLE_OPERATION = "article"
PODCAST_OPERATION = "podcast"
SYNC_OPERATION = "sync"

ANALYSIS_WORD_SOURCE = "Article Analysis"


def start_session(store: FeedStore) -> AppContext:
    ctx = AppContext(load_resources(store))
    logger.info("Started study session %s with %d feed items", ctx.session_id, len(ctx.resources))
    return ctx


def _busy(operation: str) -> Failure:
    return Failure(FailureReason.BUSY, f"{operation} is already in progress")


async def run_article_analysis(
    ctx: AppContext,
    text: str,
    *,
    client_factory: ClientFactory = GeminiClient,
) -> Result[ArticleAnalysisResult]:
    ctx.touch()
    try:
        with ctx.in_flight(ARTICLE_OPERATION):
            ctx.article.input_text = text
            result = await analyze_article(text, client_factory=client_factory)
    except OperationInProgress:
        return _busy("Article analysis")
    if isinstance(result, Success):
        ctx.article.result = result.value
        ctx.article.last_failure = None
    else:
        ctx.article.last_failure = result
        logger.warning("Article analysis failed for session %s: %s", ctx.session_id, result.reason.value)
    return result


async def run_podcast_review(
    ctx: AppContext,
    topic: str,
    inputs: FiveW1H,
    *,
    video_url: Optional[str] = None,
    client_factory: ClientFactory = GeminiClient,
) -> Result[PodcastCorrectionResult]:
    ctx.touch()
    try:
        with ctx.in_flight(PODCAST_OPERATION):
            ctx.podcast.topic = topic
            ctx.podcast.inputs = inputs
            if video_url is not None:
                ctx.podcast.video_url = video_url
            result = await review_podcast_summary(topic, inputs, client_factory=client_factory)
    except OperationInProgress:
        return _busy("Podcast review")
    if isinstance(result, Success):
        ctx.podcast.feedback = result.value
        ctx.podcast.last_failure = None
    else:
        ctx.podcast.last_failure = result
        if result.reason is not FailureReason.VALIDATION:
            logger.warning("Podcast review failed for session %s: %s", ctx.session_id, result.reason.value)
    return result


def save_vocabulary(ctx: AppContext, entry: VocabularyEntry) -> VocabularyItem:
    ctx.touch()
    return ctx.vocabulary.save(entry)


def save_analysis_word(ctx: AppContext, index: int) -> VocabularyItem:
    """Save word ``index`` of the current analysis, with its example as context."""
    result = ctx.article.result
    if result is None or not (0 <= index < len(result.key_vocabulary)):
        raise IndexError(index)
    word = result.key_vocabulary[index]
    return save_vocabulary(
        ctx,
        VocabularyEntry(
            word=word.word,
            part_of_speech=word.part_of_speech,
            definition=word.definition,
            context=word.example,
            source=ANALYSIS_WORD_SOURCE,
        ),
    )


async def sync_vocabulary(ctx: AppContext, *, delay_seconds: float = 0.0) -> Result[int]:
    ctx.touch()
    try:
        with ctx.in_flight(SYNC_OPERATION):
            moved = await ctx.vocabulary.sync(delay_seconds)
    except OperationInProgress:
        return _busy("Vocabulary sync")
    logger.info("Synced %d words for session %s", moved, ctx.session_id)
    return Success(moved)
