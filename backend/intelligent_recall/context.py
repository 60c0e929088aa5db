"""
Per-session application state.

One ``AppContext`` holds everything a study session needs: the active view,
the resource feed loaded at creation, the selected resource, the per-view
drafts and the vocabulary bank. Operations receive the context explicitly;
nothing here is shared between sessions.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set

from .results import Failure
from .schemas import ArticleAnalysisResult, FiveW1H, IncomingResource, PodcastCorrectionResult
from .vocab_bank import VocabularyBank


class ViewState(str, Enum):
    DASHBOARD = "dashboard"
    ARTICLE_ANALYZER = "article_analyzer"
    PODCAST_PRACTICE = "podcast_practice"
    VOCAB_BANK = "vocab_bank"


class OperationInProgress(Exception):
    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} is already in progress")
        self.operation = operation


class UnknownResource(LookupError):
    pass


@dataclass
class ArticleDraft:
    input_text: str = ""
    result: Optional[ArticleAnalysisResult] = None
    last_failure: Optional[Failure] = None


@dataclass
class PodcastDraft:
    video_url: str = ""
    topic: str = ""
    inputs: FiveW1H = field(default_factory=FiveW1H)
    feedback: Optional[PodcastCorrectionResult] = None
    last_failure: Optional[Failure] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppContext:
    def __init__(self, resources: Optional[List[IncomingResource]] = None, *, session_id: Optional[str] = None) -> None:
        self.session_id: str = session_id or uuid.uuid4().hex
        self.created_at: datetime = _utcnow()
        self.last_activity_at: datetime = self.created_at
        self.current_view: ViewState = ViewState.DASHBOARD
        self.resources: List[IncomingResource] = list(resources or [])
        self.active_resource: Optional[IncomingResource] = None
        self.vocabulary = VocabularyBank()
        self.article = ArticleDraft()
        self.podcast = PodcastDraft()
        self._in_flight: Set[str] = set()

    def touch(self) -> None:
        self.last_activity_at = _utcnow()

    def change_view(self, view: ViewState) -> None:
        self.current_view = ViewState(view)

    def open_manual(self, view: ViewState) -> None:
        """Enter a view without a feed item behind it."""
        self.active_resource = None
        self.change_view(view)

    def update_drafts(
        self,
        *,
        article_text: Optional[str] = None,
        topic: Optional[str] = None,
        video_url: Optional[str] = None,
        inputs: Optional[FiveW1H] = None,
    ) -> None:
        """Store what the user typed but has not submitted yet. ``None`` leaves a field alone."""
        if article_text is not None:
            self.article.input_text = article_text
        if topic is not None:
            self.podcast.topic = topic
        if video_url is not None:
            self.podcast.video_url = video_url
        if inputs is not None:
            self.podcast.inputs = inputs

    def find_resource(self, resource_id: str) -> IncomingResource:
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        raise UnknownResource(resource_id)

    def process_resource(self, resource_id: str) -> ViewState:
        resource = self.find_resource(resource_id)
        self.active_resource = resource
        if resource.kind == "article":
            self.article.input_text = resource.content or ""
            self.change_view(ViewState.ARTICLE_ANALYZER)
        else:
            self.podcast.video_url = resource.url or ""
            self.podcast.topic = resource.title
            self.change_view(ViewState.PODCAST_PRACTICE)
        return self.current_view

    def is_busy(self, operation: str) -> bool:
        return operation in self._in_flight

    @property
    def busy_operations(self) -> List[str]:
        return sorted(self._in_flight)

    @contextmanager
    def in_flight(self, operation: str) -> Iterator[None]:
        # No await between the check and the add
        if operation in self._in_flight:
            raise OperationInProgress(operation)
        self._in_flight.add(operation)
        try:
            yield
        finally:
            self._in_flight.discard(operation)


_contexts: Dict[str, AppContext] = {}


def register_context(ctx: AppContext) -> AppContext:
    _contexts[ctx.session_id] = ctx
    return ctx


def get_context(session_id: str) -> Optional[AppContext]:
    return _contexts.get(session_id)


def drop_context(session_id: str) -> bool:
    return _contexts.pop(session_id, None) is not None


def all_contexts() -> List[AppContext]:
    return list(_contexts.values())
