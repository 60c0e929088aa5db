from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from .context import all_contexts, drop_context
from .settings import settings

logger = logging.getLogger(__name__)


def purge_idle_sessions(now: Optional[datetime] = None, *, max_idle: Optional[timedelta] = None) -> int:
	now = now or datetime.now(timezone.utc)
	max_idle = max_idle if max_idle is not None else timedelta(hours=settings.session_idle_hours)
	threshold = now - max_idle
	removed = 0
	for ctx in all_contexts():
		# Sessions with a call still in flight are kept until it settles
		if ctx.last_activity_at < threshold and not ctx.busy_operations:
			if drop_context(ctx.session_id):
				removed += 1
	if removed:
		logger.info("Purged %d idle study sessions", removed)
	return removed
