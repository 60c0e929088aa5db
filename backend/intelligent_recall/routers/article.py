from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..orchestrator import run_article_analysis, save_analysis_word
from ..schemas import ArticleAnalysisResult, VocabularyItem
from ..services.common import ClientFactory
from .common import get_client_factory, require_context, unwrap


router = APIRouter(prefix="/article", tags=["article"])


class AnalyzeRequest(BaseModel):
    session_id: str
    # Omitted text means "analyze the current draft" (e.g. a feed item's content)
    text: Optional[str] = None


class SaveWordRequest(BaseModel):
    session_id: str
    index: int = Field(ge=0)


@router.post("/analyze", response_model=ArticleAnalysisResult)
async def analyze(req: AnalyzeRequest, client_factory: ClientFactory = Depends(get_client_factory)):
    ctx = require_context(req.session_id)
    text = req.text if req.text is not None else ctx.article.input_text
    result = await run_article_analysis(ctx, text, client_factory=client_factory)
    return unwrap(result)


@router.post("/save_word", response_model=VocabularyItem, status_code=201)
async def save_word(req: SaveWordRequest):
    ctx = require_context(req.session_id)
    try:
        return save_analysis_word(ctx, req.index)
    except IndexError:
        raise HTTPException(status_code=404, detail="No analyzed word at that index")
