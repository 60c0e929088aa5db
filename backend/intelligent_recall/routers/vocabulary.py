from __future__ import annotations

from typing import List

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from ..orchestrator import save_vocabulary, sync_vocabulary
from ..schemas import VocabularyEntry, VocabularyItem
from ..settings import settings
from .common import require_context, unwrap


router = APIRouter(prefix="/vocabulary", tags=["vocabulary"])


class VocabularyListResponse(BaseModel):
    items: List[VocabularyItem]
    pending_count: int
    synced_count: int


class SaveRequest(VocabularyEntry):
    session_id: str


class SyncRequest(BaseModel):
    session_id: str


class SyncResponse(BaseModel):
    synced: int
    pending_count: int


@router.get("/{session_id}", response_model=VocabularyListResponse)
async def list_vocabulary(session_id: str):
    bank = require_context(session_id).vocabulary
    return VocabularyListResponse(
        items=bank.items,
        pending_count=len(bank.pending()),
        synced_count=len(bank.synced()),
    )


@router.post("/save", response_model=VocabularyItem, status_code=201)
async def save(req: SaveRequest):
    ctx = require_context(req.session_id)
    entry = VocabularyEntry(**req.model_dump(exclude={"session_id"}))
    return save_vocabulary(ctx, entry)


@router.post("/sync", response_model=SyncResponse)
async def sync(req: SyncRequest):
    ctx = require_context(req.session_id)
    moved = unwrap(await sync_vocabulary(ctx, delay_seconds=settings.vocab_sync_delay_seconds))
    return SyncResponse(synced=moved, pending_count=len(ctx.vocabulary.pending()))


@router.get("/{session_id}/export.csv")
async def export_csv(session_id: str):
    bank = require_context(session_id).vocabulary
    return Response(
        content=bank.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="vocabulary.csv"'},
    )
