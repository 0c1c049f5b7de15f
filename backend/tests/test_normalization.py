"""
Tests for session normalization: tolerant loading and strict importing.
"""

import pytest
from datetime import datetime, timezone

from persona_chat.exceptions import SessionFormatError
from persona_chat.storage import (
    coerce_session_records,
    normalize_session,
    normalize_sessions,
    parse_import_document,
    parse_timestamp,
)
from persona_chat.storage.normalization import normalize_role

NOW = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


def record(session_id="s-1", **overrides):
    data = {
        "id": session_id,
        "characterId": "confucius",
        "title": "师说：朋友",
        "messages": [
            {"id": "m1", "type": "user", "content": "如何与朋友相处？", "timestamp": "2024-04-01T10:00:00.000Z"},
            {"id": "m2", "type": "character", "content": "君子和而不同。", "timestamp": "2024-04-01T10:00:05.000Z"},
        ],
        "createdAt": "2024-04-01T10:00:00.000Z",
        "lastActiveAt": "2024-04-01T10:00:05.000Z",
        "isActive": True,
    }
    data.update(overrides)
    return data


class TestParseTimestamp:
    """Tests for timestamp parsing."""

    def test_iso_with_z(self):
        assert parse_timestamp("2024-04-01T10:00:00.000Z", NOW) == datetime(2024, 4, 1, 10, 0, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        assert parse_timestamp(0, NOW) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_naive_datetime_is_utc(self):
        assert parse_timestamp(datetime(2024, 1, 1), NOW).tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "not a date", True, [], {}])
    def test_garbage_uses_default(self, value):
        assert parse_timestamp(value, NOW) == NOW


class TestNormalizeRole:
    """Tests for role spelling normalization."""

    @pytest.mark.parametrize("value,expected", [
        ("user", "user"),
        ("Human", "user"),
        ("character", "character"),
        ("assistant", "character"),
        ("AI", "character"),
        ("system", None),
        (None, None),
    ])
    def test_roles(self, value, expected):
        assert normalize_role(value) == expected


class TestNormalizeSession:
    """Tests for single-record normalization."""

    def test_full_record(self):
        session = normalize_session(record(), now=NOW)
        assert session.id == "s-1"
        assert session.persona_id == "confucius"
        assert [m.role for m in session.messages] == ["user", "character"]
        assert session.last_active_at == datetime(2024, 4, 1, 10, 0, 5, tzinfo=timezone.utc)

    def test_missing_title_gets_placeholder(self):
        session = normalize_session(record(title=""), now=NOW)
        assert session.title == "与未知角色的对话 - 4月1日 10:00"

    def test_custom_title_factory(self):
        session = normalize_session(record(title=None), now=NOW, title_factory=lambda pid, ts: f"{pid}-title")
        assert session.title == "confucius-title"

    def test_missing_timestamps_default_to_now(self):
        session = normalize_session({"id": "s-2", "characterId": "laozi"}, now=NOW)
        assert session.created_at == NOW
        assert session.last_active_at == NOW
        assert session.messages == []

    def test_last_active_never_before_created(self):
        session = normalize_session(record(lastActiveAt="2020-01-01T00:00:00Z"), now=NOW)
        assert session.last_active_at == session.created_at

    def test_missing_id_tolerant(self):
        assert normalize_session(record(id=None), now=NOW) is None

    def test_non_record_tolerant(self):
        assert normalize_session("nope", now=NOW) is None

    def test_malformed_message_dropped(self):
        raw = record()
        raw["messages"].append({"type": "system", "content": "x"})
        raw["messages"].append("garbage")
        session = normalize_session(raw, now=NOW)
        assert len(session.messages) == 2

    def test_message_defaults(self):
        raw = record(messages=[{"role": "assistant", "content": 42}])
        message = normalize_session(raw, now=NOW).messages[0]
        assert message.role == "character"
        assert message.content == "42"
        assert message.id.startswith("msg-")

    def test_strict_rejects_bad_message(self):
        raw = record()
        raw["messages"].append({"type": "system"})
        with pytest.raises(SessionFormatError):
            normalize_session(raw, now=NOW, strict=True)

    def test_strict_rejects_missing_persona(self):
        with pytest.raises(SessionFormatError):
            normalize_session(record(characterId=None), now=NOW, strict=True)


class TestDocumentShapes:
    """Tests for the three accepted document shapes."""

    def test_bare_array(self):
        assert coerce_session_records([record()]) == [record()]

    def test_envelope(self):
        assert coerce_session_records({"exportTime": "x", "sessions": [record()]}) == [record()]

    def test_map_fills_id(self):
        raw = record()
        del raw["id"]
        records = coerce_session_records({"s-9": raw})
        assert records[0]["id"] == "s-9"

    @pytest.mark.parametrize("document", ["text", 3, {"sessions": "x"}, {"a": 1}])
    def test_unknown_shapes(self, document):
        assert coerce_session_records(document) is None

    def test_array_and_envelope_normalize_identically(self):
        records = [record("a"), record("b")]
        from_array = normalize_sessions(records, now=NOW)
        from_envelope = normalize_sessions({"sessions": records}, now=NOW)
        assert [s.model_dump() for s in from_array] == [s.model_dump() for s in from_envelope]


class TestNormalizeSessions:
    """Tests for tolerant collection loading."""

    def test_skips_bad_records(self):
        sessions = normalize_sessions([record("a"), "junk", {"title": "no id"}, record("b")], now=NOW)
        assert [s.id for s in sessions] == ["a", "b"]

    def test_duplicate_ids_keep_last(self):
        sessions = normalize_sessions([record("a", title="first"), record("a", title="second")], now=NOW)
        assert len(sessions) == 1
        assert sessions[0].title == "second"

    def test_unknown_shape_is_empty(self):
        assert normalize_sessions("junk", now=NOW) == []
        assert normalize_sessions(None, now=NOW) == []


class TestParseImportDocument:
    """Tests for strict import parsing."""

    def test_valid(self):
        sessions = parse_import_document({"sessions": [record("a"), record("b")]}, now=NOW)
        assert [s.id for s in sessions] == ["a", "b"]

    def test_bad_shape(self):
        with pytest.raises(SessionFormatError):
            parse_import_document("junk", now=NOW)

    def test_one_bad_record_rejects_all(self):
        with pytest.raises(SessionFormatError):
            parse_import_document([record("a"), {"title": "no id"}], now=NOW)
