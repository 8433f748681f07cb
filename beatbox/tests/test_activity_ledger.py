"""Activity ledger writes and windowed reads."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from beatbox.core.activity.models import ActivityEvent
from beatbox.core.activity.services import list_activity, record_activity
from beatbox.core.utils.validation import MissingFieldsError
from beatbox.extensions import db

pytestmark = pytest.mark.integration


def _event(event_id: str, user_id: str, activity_type: str, age: timedelta) -> ActivityEvent:
    return ActivityEvent(
        id=event_id,
        user_id=user_id,
        activity_type=activity_type,
        timestamp=datetime.utcnow() - age,
        details={},
    )


def test_recorded_event_is_listed_first(app):
    db.session.add(_event("old", "u1", "page_visit", timedelta(hours=1)))
    db.session.commit()

    event = record_activity("u1", "action", {"button": "save"}, page_url="/habits", action="save")

    events = list_activity()
    assert events[0].id == event.id
    assert events[0].details == {"button": "save"}
    assert events[0].page_url == "/habits"


def test_record_activity_requires_user_and_type(app):
    with pytest.raises(MissingFieldsError) as excinfo:
        record_activity("", None)

    assert excinfo.value.fields == ["user_id", "activity_type"]
    assert db.session.query(ActivityEvent).count() == 0


def test_filters_combine_with_and(app):
    db.session.add_all(
        [
            _event("u1-visit", "u1", "page_visit", timedelta(minutes=3)),
            _event("u1-action", "u1", "action", timedelta(minutes=2)),
            _event("u2-visit", "u2", "page_visit", timedelta(minutes=1)),
        ]
    )
    db.session.commit()

    events = list_activity(user_id="u1", activity_type="page_visit")

    assert [e.id for e in events] == ["u1-visit"]


def test_default_window_is_thirty_days(app):
    db.session.add_all(
        [
            _event("recent", "u1", "page_visit", timedelta(days=29)),
            _event("stale", "u1", "page_visit", timedelta(days=31)),
        ]
    )
    db.session.commit()

    assert [e.id for e in list_activity()] == ["recent"]
    assert [e.id for e in list_activity(since_days=1)] == []
    assert [e.id for e in list_activity(since_days=60)] == ["recent", "stale"]


def test_pagination_over_window(app):
    db.session.add_all(_event(f"e{i}", "u1", "page_visit", timedelta(minutes=i)) for i in range(5))
    db.session.commit()

    assert [e.id for e in list_activity(limit=2)] == ["e0", "e1"]
    assert [e.id for e in list_activity(limit=2, offset=2)] == ["e2", "e3"]
