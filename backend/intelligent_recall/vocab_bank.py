from __future__ import annotations

import asyncio
import csv
import io
import uuid
from datetime import datetime, timezone
from typing import List, Set

from .schemas import VocabularyEntry, VocabularyItem


EXPORT_COLUMNS = ["word", "part_of_speech", "definition", "context", "source", "added_at", "status"]


class VocabularyBank:
    """Words saved during one study session, newest first.

    Items only ever move from "new" to "synced"; nothing is edited or removed.
    """

    def __init__(self) -> None:
        self._items: List[VocabularyItem] = []
        self._issued_ids: Set[str] = set()

    @property
    def items(self) -> List[VocabularyItem]:
        return list(self._items)

    def pending(self) -> List[VocabularyItem]:
        return [item for item in self._items if item.status == "new"]

    def synced(self) -> List[VocabularyItem]:
        return [item for item in self._items if item.status == "synced"]

    def _new_id(self) -> str:
        item_id = uuid.uuid4().hex
        while item_id in self._issued_ids:
            item_id = uuid.uuid4().hex
        self._issued_ids.add(item_id)
        return item_id

    def save(self, entry: VocabularyEntry) -> VocabularyItem:
        item = VocabularyItem(
            **entry.model_dump(),
            id=self._new_id(),
            added_at=datetime.now(timezone.utc),
            status="new",
        )
        self._items.insert(0, item)
        return item

    def mark_synced(self) -> int:
        moved = 0
        for index, item in enumerate(self._items):
            if item.status == "new":
                self._items[index] = item.model_copy(update={"status": "synced"})
                moved += 1
        return moved

    async def sync(self, delay_seconds: float = 0.0) -> int:
        """Push every pending word downstream; always succeeds.

        The push is simulated: wait ``delay_seconds`` then flip the statuses.
        Returns how many items moved to "synced".
        """
        if not self.pending():
            return 0
        if delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        return self.mark_synced()

    def export_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        for item in self._items:
            row = item.model_dump(include=set(EXPORT_COLUMNS))
            row["added_at"] = item.added_at.isoformat()
            writer.writerow(row)
        return buffer.getvalue()
