from datetime import datetime, timedelta, timezone

from intelligent_recall.cleanup import purge_idle_sessions
from intelligent_recall.context import AppContext, get_context, register_context


def test_purges_only_idle_sessions():
    now = datetime.now(timezone.utc)
    stale = register_context(AppContext())
    stale.last_activity_at = now - timedelta(hours=30)
    fresh = register_context(AppContext())

    removed = purge_idle_sessions(now, max_idle=timedelta(hours=24))

    assert removed == 1
    assert get_context(stale.session_id) is None
    assert get_context(fresh.session_id) is fresh


def test_keeps_idle_session_with_call_in_flight():
    now = datetime.now(timezone.utc)
    ctx = register_context(AppContext())
    ctx.last_activity_at = now - timedelta(days=3)

    with ctx.in_flight("article"):
        assert purge_idle_sessions(now, max_idle=timedelta(hours=1)) == 0
    assert purge_idle_sessions(now, max_idle=timedelta(hours=1)) == 1


def test_app_start_keeps_a_handle_on_the_cleanup_watcher():
    from fastapi.testclient import TestClient

    from intelligent_recall.main import app

    with TestClient(app):
        assert not app.state.cleanup_task.done()
