from __future__ import annotations

from typing import Any, Dict

from ..results import Failure, FailureReason, Result
from ..schemas import ArticleAnalysisResult
from ..gemini_client import GeminiClient
from .common import ClientFactory, call_structured


ARTICLE_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING"},
        "key_vocabulary": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "word": {"type": "STRING"},
                    "part_of_speech": {"type": "STRING"},
                    "definition": {"type": "STRING"},
                    "example": {"type": "STRING"},
                },
                "required": ["word", "part_of_speech", "definition", "example"],
            },
        },
    },
    "required": ["summary", "key_vocabulary"],
}


def build_analysis_prompt(text: str) -> str:
    return (
        f"TEXT TO ANALYZE:\n{text}\n\n"
        "You are an expert English tutor for a C1-level student.\n"
        "Analyze the English text above.\n"
        "1. Write a concise, engaging summary of the core content.\n"
        "2. Extract 5-8 advanced (C1/C2) vocabulary words or idioms found in the text.\n"
        "3. For each word give the part of speech (e.g. Noun, Verb, Adjective, Phrasal Verb), "
        "a simple English definition, and the example sentence from the text "
        "(or a generated one if the context is weak).\n"
        "Return ONLY JSON with keys: summary (string), key_vocabulary (array of objects "
        "with word, part_of_speech, definition, example)."
    )


async def analyze_article(text: str, *, client_factory: ClientFactory = GeminiClient) -> Result[ArticleAnalysisResult]:
    """Summarize ``text`` and pull out key vocabulary."""
    text = (text or "").strip()
    if not text:
        return Failure(FailureReason.VALIDATION, "text is required")
    return await call_structured(
        build_analysis_prompt(text),
        ARTICLE_RESPONSE_SCHEMA,
        ArticleAnalysisResult,
        client_factory=client_factory,
    )
