from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


ResourceKind = Literal["article", "video"]
VocabularyStatus = Literal["new", "synced"]


class IncomingResource(BaseModel):
    """A captured article or video as shown on the dashboard feed."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: ResourceKind
    title: str
    source: str
    date: str
    content: Optional[str] = None
    url: Optional[str] = None


class VocabularyEntry(BaseModel):
    word: str = Field(min_length=1)
    part_of_speech: str = ""
    definition: str = ""
    context: str = ""
    source: str = ""


class VocabularyItem(VocabularyEntry):
    id: str
    added_at: datetime
    status: VocabularyStatus = "new"


class KeyVocabulary(BaseModel):
    word: str
    part_of_speech: str
    definition: str
    example: str


class ArticleAnalysisResult(BaseModel):
    summary: str
    key_vocabulary: List[KeyVocabulary]


class FiveW1H(BaseModel):
    who: str = ""
    what: str = ""
    where: str = ""
    when: str = ""
    why: str = ""
    how: str = ""


class PodcastCorrectionResult(BaseModel):
    corrected_text: str
    grammar_feedback: List[str] = Field(default_factory=list)
    content_feedback: str
    overall_score: int

    @field_validator("overall_score", mode="before")
    @classmethod
    def _round_score(cls, value):
        # The model sometimes answers 87.5 for a NUMBER field
        if isinstance(value, float):
            return int(round(value))
        return value
