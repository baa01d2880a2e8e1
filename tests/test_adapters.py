import json
from datetime import datetime

import pytest

from activity_engine.adapters.csv_adapter import parse as parse_csv
from activity_engine.adapters.json_adapter import parse as parse_json


def test_csv_parse_success(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text(
        "title,start_time,end_time,type,priority,client_name,attended,booked_at\n"
        "Review,2026-09-01T10:00:00,2026-09-01T11:00:00,meeting,high,Priya Sharma,true,2026-08-31T09:00:00\n"
        "Intro,2026-09-02T15:00:00,2026-09-02T15:30:00,call,,,no,\n",
        encoding="utf-8",
    )
    history = parse_csv(str(path))
    assert len(history) == 2
    assert history[0].attended is True
    assert history[0].booked_at == datetime(2026, 8, 31, 9, 0)
    assert history[1].priority == "medium"
    assert history[1].client_name is None
    assert history[1].attended is False
    assert history[1].booked_at is None


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text(
        "title,start_time,end_time,type,attended\nReview,bad,2026-09-01T11:00:00,meeting,true\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Row 2"):
        parse_csv(str(path))


def test_csv_parse_invalid_type(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text(
        "title,start_time,end_time,type,attended\nReview,2026-09-01T10:00:00,2026-09-01T11:00:00,email,true\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="invalid type"):
        parse_csv(str(path))


def test_json_parse_success(tmp_path):
    path = tmp_path / "snapshot.json"
    payload = {
        "clients": {"1": "Priya Sharma"},
        "tasks": [{"id": 1, "title": "Send proposal", "dueDate": "2026-10-20T12:00:00", "clientId": 1}],
        "appointments": [
            {"id": 2, "title": "Review", "startTime": "2026-10-21T09:00:00", "endTime": "2026-10-21T10:00:00"}
        ],
        "followUps": [{"id": 3, "title": "Check in"}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    snapshot = parse_json(str(path))
    assert len(snapshot.tasks) == 1
    assert len(snapshot.appointments) == 1
    assert len(snapshot.follow_ups) == 1
    assert snapshot.alerts == []
    assert snapshot.client_names == {1: "Priya Sharma"}


def test_json_parse_malformed_timestamp(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"tasks": [{"id": 1, "title": "x", "dueDate": "bad"}]}), encoding="utf-8")
    with pytest.raises(ValueError, match="tasks item 1"):
        parse_json(str(path))


def test_json_parse_requires_object(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps([{"id": 1}]), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))
