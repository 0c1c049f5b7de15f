"""
Tests for SessionStore: lifecycle, titling, retention, import/export and quota.
"""

import asyncio
import json
import pytest

from persona_chat.core import SessionStore
from persona_chat.exceptions import PersonaNotFoundError
from persona_chat.models import Message, PersonaCreate
from persona_chat.storage import MemoryStorage, StorageSessionRepository


def user(text: str) -> Message:
    return Message(role="user", content=text)


def character(text: str) -> Message:
    return Message(role="character", content=text)


class TestSessionLifecycle:
    """Create, read, rename and delete."""

    @pytest.mark.asyncio
    async def test_create_with_placeholder(self, store):
        session = await store.create_session("confucius")
        assert session.title == "与孔子的对话 - 1月1日 12:00"
        assert session.id.startswith("session-")
        assert session.created_at == session.last_active_at
        assert (await store.get_session(session.id)).id == session.id

    @pytest.mark.asyncio
    async def test_create_with_title(self, store):
        session = await store.create_session("confucius", "读书笔记")
        assert session.title == "读书笔记"

    @pytest.mark.asyncio
    async def test_create_unknown_persona(self, store):
        with pytest.raises(PersonaNotFoundError):
            await store.create_session("nobody")

    @pytest.mark.asyncio
    async def test_get_unknown(self, store):
        assert await store.get_session("missing") is None

    @pytest.mark.asyncio
    async def test_rename(self, store, clock):
        session = await store.create_session("confucius")
        clock.advance(minutes=1)
        renamed = await store.rename_session(session.id, "  我的  对话 ")
        assert renamed.title == "我的 对话"
        assert renamed.last_active_at == clock()

    @pytest.mark.asyncio
    async def test_rename_blank(self, store):
        session = await store.create_session("confucius")
        with pytest.raises(ValueError):
            await store.rename_session(session.id, "   ")

    @pytest.mark.asyncio
    async def test_rename_unknown(self, store):
        assert await store.rename_session("missing", "x") is None

    @pytest.mark.asyncio
    async def test_delete(self, store):
        session = await store.create_session("confucius")
        assert await store.delete_session(session.id)
        assert await store.get_session(session.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_is_noop(self, store):
        await store.create_session("confucius")
        assert not await store.delete_session("missing")
        assert len(await store.list_sessions()) == 1

    @pytest.mark.asyncio
    async def test_clear_all(self, store):
        await store.create_session("confucius")
        await store.create_session("laozi")
        assert await store.clear_all() == 2
        assert await store.list_sessions() == []


class TestMessages:
    """Appending, replacing and titling."""

    @pytest.mark.asyncio
    async def test_append_unknown_session(self, store):
        assert await store.append_message("missing", user("你好")) is None

    @pytest.mark.asyncio
    async def test_first_user_message_sets_interim_title(self, store):
        session = await store.create_session("confucius")
        session = await store.append_message(session.id, user("如何与朋友相处？"))
        assert session.title == "孔子: 如何与朋友相处？"

    @pytest.mark.asyncio
    async def test_smart_title_after_reply(self, store):
        session = await store.create_session("confucius")
        await store.append_message(session.id, user("如何与朋友相处？"))
        session = await store.append_message(session.id, character("君子和而不同。"))
        assert session.title == "师说：朋友"
        assert (await store.get_session(session.id)).title == "师说：朋友"

    @pytest.mark.asyncio
    async def test_titling_is_one_shot(self, store):
        session = await store.create_session("socrates")
        await store.append_message(session.id, user("什么是真正的智慧？"))
        await store.append_message(session.id, character("我只知道我一无所知。"))
        await store.append_message(session.id, user("我想学习Python编程"))
        session = await store.append_message(session.id, character("好。"))
        assert session.title == "哲思：智慧"

        again = await store.update_session_title(session.id)
        assert again.title == "哲思：智慧"

    @pytest.mark.asyncio
    async def test_character_only_keeps_placeholder(self, store):
        session = await store.create_session("socrates")
        placeholder = session.title
        await store.append_message(session.id, character("欢迎。"))
        session = await store.append_message(session.id, character("有什么想聊的吗？"))
        assert session.title == placeholder

    @pytest.mark.asyncio
    async def test_smart_title_after_persona_deleted(self, store, personas):
        persona = await personas.create_custom(PersonaCreate(id="xiaoming", name="小明"))
        session = await store.create_session(persona.id)
        session = await store.append_message(session.id, user("什么是真正的智慧？"))
        assert session.title == "小明: 什么是真正的智慧？"

        assert await personas.delete_custom(persona.id)
        session = await store.append_message(session.id, character("好问题。"))
        assert session.title == "关于智慧的讨论"

    @pytest.mark.asyncio
    async def test_manual_title_never_overwritten(self, store):
        session = await store.create_session("socrates")
        await store.rename_session(session.id, "我的哲学课")
        await store.append_message(session.id, user("什么是真正的智慧？"))
        session = await store.append_message(session.id, character("好问题。"))
        assert session.title == "我的哲学课"

    @pytest.mark.asyncio
    async def test_update_session_title_unknown(self, store):
        assert await store.update_session_title("missing") is None

    @pytest.mark.asyncio
    async def test_append_bumps_last_active(self, store, clock):
        session = await store.create_session("confucius")
        clock.advance(minutes=5)
        session = await store.append_message(session.id, user("你好"))
        assert session.last_active_at == clock()

    @pytest.mark.asyncio
    async def test_replace_message(self, store):
        session = await store.create_session("confucius")
        await store.append_message(session.id, user("你好"))
        session = await store.append_message(session.id, character("半句"))
        target = session.messages[1]

        session = await store.replace_message(session.id, target.id, character("完整的一句话。"))
        assert len(session.messages) == 2
        assert session.messages[1].id == target.id
        assert session.messages[1].content == "完整的一句话。"

    @pytest.mark.asyncio
    async def test_replace_unknown_message(self, store):
        session = await store.create_session("confucius")
        assert await store.replace_message(session.id, "missing", user("x")) is None
        assert await store.replace_message("missing", "missing", user("x")) is None

    @pytest.mark.asyncio
    async def test_concurrent_appends_are_serialized(self, store):
        session = await store.create_session("confucius")
        await asyncio.gather(*(store.append_message(session.id, user(f"消息{i}")) for i in range(10)))
        stored = await store.get_session(session.id)
        assert sorted(m.content for m in stored.messages) == sorted(f"消息{i}" for i in range(10))


class TestListing:
    """Summaries and per-persona listing."""

    @pytest.mark.asyncio
    async def test_summaries_most_recent_first(self, store, clock):
        first = await store.create_session("confucius")
        clock.advance(minutes=1)
        second = await store.create_session("socrates")
        clock.advance(minutes=1)
        await store.append_message(first.id, user("你好"))

        summaries = await store.list_session_summaries()
        assert [s.id for s in summaries] == [first.id, second.id]
        assert summaries[0].persona_name == "孔子"
        assert summaries[0].last_message == "你好"
        assert summaries[0].message_count == 1
        assert summaries[1].last_message == ""

    @pytest.mark.asyncio
    async def test_summaries_filtered(self, store):
        await store.create_session("confucius")
        await store.create_session("socrates")
        summaries = await store.list_session_summaries("socrates")
        assert [s.persona_id for s in summaries] == ["socrates"]

    @pytest.mark.asyncio
    async def test_list_by_persona(self, store):
        await store.create_session("confucius")
        await store.create_session("confucius")
        await store.create_session("laozi")
        assert len(await store.list_sessions_by_persona("confucius")) == 2
        assert await store.list_sessions_by_persona("dufu") == []


class TestRetention:
    """Retention cap."""

    @pytest.mark.asyncio
    async def test_create_beyond_cap_evicts_oldest(self, repository, personas, clock):
        store = SessionStore(repository, personas, max_sessions=3, clock=clock)
        created = []
        for _ in range(5):
            created.append((await store.create_session("confucius")).id)
            clock.advance(minutes=1)

        remaining = [s.id for s in await store.list_sessions()]
        assert remaining == list(reversed(created[-3:]))

    @pytest.mark.asyncio
    async def test_import_beyond_cap_trims(self, repository, personas, clock):
        store = SessionStore(repository, personas, max_sessions=3, clock=clock)
        records = [
            {"id": f"s{i}", "characterId": "confucius", "title": f"t{i}",
             "createdAt": f"2024-01-0{i + 1}T00:00:00Z", "lastActiveAt": f"2024-01-0{i + 1}T00:00:00Z"}
            for i in range(5)
        ]
        result = await store.import_sessions(json.dumps(records))
        assert result.success
        assert result.imported == 5
        assert result.total == 3
        assert [s.id for s in await store.list_sessions()] == ["s4", "s3", "s2"]


class TestImportExport:
    """Export envelope and all-or-nothing import."""

    async def _seed(self, store):
        session = await store.create_session("confucius")
        await store.append_message(session.id, user("如何与朋友相处？"))
        await store.append_message(session.id, character("君子和而不同。"))
        await store.create_session("laozi")
        return session

    @pytest.mark.asyncio
    async def test_export_envelope(self, store):
        await self._seed(store)
        exported = json.loads(await store.export_sessions())
        assert exported["sessionCount"] == 2
        assert len(exported["sessions"]) == 2
        assert "exportTime" in exported

    @pytest.mark.asyncio
    async def test_export_selection(self, store):
        session = await self._seed(store)
        exported = json.loads(await store.export_sessions([session.id]))
        assert [s["id"] for s in exported["sessions"]] == [session.id]

    @pytest.mark.asyncio
    async def test_round_trip(self, store):
        await self._seed(store)
        before = await store.list_sessions()
        exported = await store.export_sessions()
        await store.clear_all()

        result = await store.import_sessions(exported)
        after = await store.list_sessions()
        assert result.success
        assert [(s.id, s.title, len(s.messages)) for s in after] == \
               [(s.id, s.title, len(s.messages)) for s in before]

    @pytest.mark.asyncio
    async def test_array_and_envelope_equivalent(self, repository, personas, clock):
        await self._seed(SessionStore(repository, personas, clock=clock))
        envelope = await SessionStore(repository, personas, clock=clock).export_sessions()
        bare = json.dumps(json.loads(envelope)["sessions"])

        store_a = SessionStore(StorageSessionRepository(MemoryStorage()), personas, clock=clock)
        store_b = SessionStore(StorageSessionRepository(MemoryStorage()), personas, clock=clock)
        await store_a.import_sessions(envelope)
        await store_b.import_sessions(bare)
        assert [s.model_dump() for s in await store_a.list_sessions()] == \
               [s.model_dump() for s in await store_b.list_sessions()]

    @pytest.mark.asyncio
    async def test_import_map_shape(self, store):
        document = {"abc": {"characterId": "laozi", "title": "论道：无为"}}
        result = await store.import_sessions(json.dumps(document))
        assert result.success
        assert (await store.get_session("abc")).title == "论道：无为"

    @pytest.mark.asyncio
    async def test_invalid_json_leaves_store_untouched(self, store):
        await self._seed(store)
        before = await store.export_sessions()
        result = await store.import_sessions("{not json")
        assert not result.success
        assert result.error
        assert await store.export_sessions() == before

    @pytest.mark.asyncio
    async def test_one_bad_record_imports_nothing(self, store):
        records = [
            {"id": "good", "characterId": "laozi", "title": "t"},
            {"characterId": "laozi", "title": "no id"},
        ]
        result = await store.import_sessions(json.dumps(records))
        assert not result.success
        assert await store.get_session("good") is None

    @pytest.mark.asyncio
    async def test_merge_later_last_active_wins(self, store):
        session = await self._seed(store)
        stale = {"id": session.id, "characterId": "confucius", "title": "旧标题",
                 "createdAt": "2020-01-01T00:00:00Z", "lastActiveAt": "2020-01-01T00:00:00Z"}
        await store.import_sessions(json.dumps([stale]))
        assert (await store.get_session(session.id)).title == "师说：朋友"

        fresh = dict(stale, title="新标题", lastActiveAt="2030-01-01T00:00:00Z")
        await store.import_sessions(json.dumps([fresh]))
        assert (await store.get_session(session.id)).title == "新标题"

    @pytest.mark.asyncio
    async def test_merge_tie_prefers_imported(self, store):
        session = await self._seed(store)
        current = await store.get_session(session.id)
        record = current.to_record()
        record["title"] = "导入的标题"
        await store.import_sessions(json.dumps([record]))
        assert (await store.get_session(session.id)).title == "导入的标题"

    @pytest.mark.asyncio
    async def test_untitled_import_named_after_persona(self, store, personas):
        await personas.create_custom(PersonaCreate(id="xiaoming", name="小明"))
        records = [
            {"id": "a", "characterId": "socrates", "createdAt": "2024-03-05T09:07:00Z"},
            {"id": "b", "characterId": "xiaoming", "createdAt": "2024-03-05T09:07:00Z"},
            {"id": "c", "characterId": "gone", "createdAt": "2024-03-05T09:07:00Z"},
        ]
        assert (await store.import_sessions(json.dumps(records))).success
        assert (await store.get_session("a")).title == "与苏格拉底的对话 - 3月5日 09:07"
        assert (await store.get_session("b")).title == "与小明的对话 - 3月5日 09:07"
        assert (await store.get_session("c")).title == "与未知角色的对话 - 3月5日 09:07"

    @pytest.mark.asyncio
    async def test_untitled_stored_record_named_after_persona(self, store, storage):
        record = {"id": "a", "characterId": "laozi", "createdAt": "2024-03-05T09:07:00Z"}
        await storage.save("sessions.json", json.dumps([record]))
        assert (await store.get_session("a")).title == "与老子的对话 - 3月5日 09:07"


class TestStorageInfo:
    """Advisory quota."""

    @pytest.mark.asyncio
    async def test_empty(self, store):
        info = await store.storage_info()
        assert info.used == 0
        assert info.total == 5 * 1024 * 1024
        assert info.session_count == 0
        assert not info.warning

    @pytest.mark.asyncio
    async def test_warning_near_capacity(self, repository, personas, clock):
        store = SessionStore(repository, personas, capacity_bytes=200, clock=clock)
        await store.create_session("confucius")
        await store.create_session("laozi")
        info = await store.storage_info()
        assert info.session_count == 2
        assert info.used > 160
        assert info.warning

    @pytest.mark.asyncio
    async def test_writes_not_blocked_over_capacity(self, repository, personas, clock):
        store = SessionStore(repository, personas, capacity_bytes=10, clock=clock)
        session = await store.create_session("confucius")
        assert await store.append_message(session.id, user("你好")) is not None
        assert (await store.storage_info()).usage_ratio > 1


class TestAnalysis:
    """Title analysis exposure."""

    @pytest.mark.asyncio
    async def test_analyze(self, store):
        session = await store.create_session("einstein")
        await store.append_message(session.id, user("我想学习Python编程，有什么建议吗？"))
        await store.append_message(session.id, character("从小项目开始。"))
        analysis = await store.analyze_session(session.id)
        assert analysis.eligible
        assert analysis.entity.entity == "Python编程"
        assert analysis.title == "科学：Python编程"

    @pytest.mark.asyncio
    async def test_analyze_unknown(self, store):
        assert await store.analyze_session("missing") is None
