from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from intelligent_recall.db import Base
from intelligent_recall.models import IncomingResourceRow
from intelligent_recall.services.feed import (
    PLACEHOLDER_RESOURCES,
    SqlFeedStore,
    SupabaseFeedStore,
    format_display_date,
    load_resources,
    map_row,
)

from conftest import FailingFeedStore, StaticFeedStore


def _row(i, **overrides):
    row = {
        "id": f"r{i}",
        "type": "article",
        "title": f"Title {i}",
        "source": "BBC Learning English",
        "created_at": f"2024-03-0{i}T09:30:00",
        "content": f"Body {i}",
        "url": None,
    }
    row.update(overrides)
    return row


def test_zero_rows_yield_placeholder():
    assert load_resources(StaticFeedStore([])) == PLACEHOLDER_RESOURCES


def test_unreachable_store_yields_placeholder():
    resources = load_resources(FailingFeedStore())
    assert resources == PLACEHOLDER_RESOURCES
    assert resources[0].id == "demo-1"
    assert resources[0].kind == "article"


def test_rows_map_in_store_order_with_default_source():
    rows = [_row(3), _row(2, source=None), _row(1, source="")]
    resources = load_resources(StaticFeedStore(rows))
    assert [r.id for r in resources] == ["r3", "r2", "r1"]
    assert [r.source for r in resources] == ["BBC Learning English", "Unknown Source", "Unknown Source"]


def test_loader_asks_for_configured_limit():
    store = StaticFeedStore([_row(1)])
    load_resources(store)
    assert store.limits == [6]


def test_map_row_video_keeps_url_and_stringifies_id():
    resource = map_row(_row(1, id=42, type="video", content=None, url="https://youtu.be/dQw4w9WgXcQ"))
    assert resource.id == "42"
    assert resource.kind == "video"
    assert resource.url == "https://youtu.be/dQw4w9WgXcQ"


def test_map_row_skips_unknown_type():
    assert map_row(_row(1, type="tweet")) is None
    assert load_resources(StaticFeedStore([_row(1, type="tweet")])) == PLACEHOLDER_RESOURCES


def test_format_display_date():
    assert format_display_date(datetime(2024, 10, 17, 15, 45)) == "Oct 17, 03:45 PM"
    assert format_display_date("2024-01-05T10:00:00") == "Jan 5, 10:00 AM"
    assert format_display_date("not a date") == "Invalid Date"
    assert format_display_date(None) == "Invalid Date"


def test_format_display_date_accepts_short_fractions():
    assert format_display_date("2024-10-17T15:45:12.12+00:00") == "Oct 17, 03:45 PM"
    assert format_display_date("2024-10-17T15:45:12.1Z") == "Oct 17, 03:45 PM"


def test_format_display_date_renders_aware_and_naive_values_in_utc():
    aware = datetime(2024, 10, 17, 17, 45, tzinfo=timezone(timedelta(hours=2)))
    assert format_display_date(aware) == "Oct 17, 03:45 PM"
    assert format_display_date("2024-10-17T17:45:00+02:00") == "Oct 17, 03:45 PM"
    assert format_display_date(datetime(2024, 10, 17, 15, 45)) == format_display_date(aware)


@pytest.fixture
def sql_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, future=True)
    yield factory
    engine.dispose()


def test_sql_store_returns_newest_new_rows_only(sql_session_factory):
    base = datetime(2024, 5, 1, 8, 0)
    with sql_session_factory() as db:
        for i in range(8):
            db.add(
                IncomingResourceRow(
                    id=f"new-{i}",
                    type="article" if i % 2 else "video",
                    title=f"Item {i}",
                    source=None if i == 7 else "TED",
                    status="new",
                    created_at=base + timedelta(hours=i),
                )
            )
        db.add(IncomingResourceRow(id="old", type="article", title="Done", status="processed", created_at=base + timedelta(days=1)))
        db.commit()

    resources = load_resources(SqlFeedStore(sql_session_factory))

    assert [r.id for r in resources] == [f"new-{i}" for i in range(7, 1, -1)]
    assert resources[0].source == "Unknown Source"
    assert resources[0].date == "May 1, 03:00 PM"


def test_sql_store_with_fewer_rows_than_limit(sql_session_factory):
    with sql_session_factory() as db:
        db.add(IncomingResourceRow(id="a", type="video", title="Talk", url="https://youtu.be/x", created_at=datetime(2024, 1, 1)))
        db.add(IncomingResourceRow(id="b", type="article", title="Essay", created_at=datetime(2024, 1, 2)))
        db.commit()

    resources = load_resources(SqlFeedStore(sql_session_factory))

    assert [r.id for r in resources] == ["b", "a"]


class _FakeQuery:
    def __init__(self, log, data):
        self.log = log
        self.data = data

    def __getattr__(self, name):
        def _call(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self

        return _call

    def execute(self):
        self.log.append(("execute", (), {}))
        return self


def test_supabase_store_builds_expected_query():
    log = []
    client = _FakeQuery(log, [_row(1)])
    store = SupabaseFeedStore(table="incoming_resources", client=client)

    rows = store.fetch_new(6)

    assert rows == [_row(1)]
    assert log == [
        ("table", ("incoming_resources",), {}),
        ("select", ("id,type,title,source,created_at,content,url",), {}),
        ("eq", ("status", "new"), {}),
        ("order", ("created_at",), {"desc": True}),
        ("limit", (6,), {}),
        ("execute", (), {}),
    ]

