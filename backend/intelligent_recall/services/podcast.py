from __future__ import annotations

import re
from typing import Any, Dict, Optional

from ..results import Failure, FailureReason, Result
from ..schemas import FiveW1H, PodcastCorrectionResult
from ..gemini_client import GeminiClient
from .common import ClientFactory, call_structured


PODCAST_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "corrected_text": {"type": "STRING"},
        "grammar_feedback": {"type": "ARRAY", "items": {"type": "STRING"}},
        "content_feedback": {"type": "STRING"},
        "overall_score": {"type": "NUMBER"},
    },
    "required": ["corrected_text", "grammar_feedback", "content_feedback", "overall_score"],
}

_YOUTUBE_ID = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


def youtube_id(url: Optional[str]) -> Optional[str]:
    """Return the 11-character video id of a YouTube link, or None."""
    if not url:
        return None
    match = _YOUTUBE_ID.match(url.strip())
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


def youtube_embed_url(url: Optional[str]) -> Optional[str]:
    video_id = youtube_id(url)
    if video_id is None:
        return None
    return f"https://www.youtube.com/embed/{video_id}"


def build_review_prompt(topic: str, inputs: FiveW1H) -> str:
    draft = (
        f"Who: {inputs.who}\n"
        f"What: {inputs.what}\n"
        f"Where: {inputs.where}\n"
        f"When: {inputs.when}\n"
        f"Why: {inputs.why}\n"
        f"How: {inputs.how}"
    )
    return (
        f"STUDENT INPUT:\n{draft}\n\n"
        f'You are an English tutor correcting a student\'s summary of a podcast/video about: "{topic}".\n'
        "The student used the 5W1H method.\n"
        "1. Re-write the student's input into a cohesive, grammatically correct paragraph (C1 level).\n"
        "2. List the specific grammar or vocabulary mistakes the student made (empty list if none).\n"
        "3. Give feedback on whether they covered the 5W1H aspects logically, inferring from the topic "
        "what a good summary would look like.\n"
        "4. Give a score from 1-100 based on clarity and grammar.\n"
        "Return ONLY JSON with keys: corrected_text, grammar_feedback (array of strings), "
        "content_feedback, overall_score."
    )


async def review_podcast_summary(
    topic: str,
    inputs: FiveW1H,
    *,
    client_factory: ClientFactory = GeminiClient,
) -> Result[PodcastCorrectionResult]:
    topic = (topic or "").strip()
    if not topic:
        return Failure(FailureReason.VALIDATION, "Please enter the topic or title so the tutor can verify context.")
    return await call_structured(
        build_review_prompt(topic, inputs),
        PODCAST_RESPONSE_SCHEMA,
        PodcastCorrectionResult,
        client_factory=client_factory,
    )
