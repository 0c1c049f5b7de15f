"""
Unit tests for title formatting and voice profiles.
"""

from persona_chat.titling import (
    GENERIC_PROFILE,
    EntityAction,
    TitleCandidate,
    TitleFormatter,
    TopicMatch,
    VoiceProfile,
    get_voice_profile,
)


class TestVoiceProfiles:
    """Tests for voice profile lookup."""

    def test_known_persona(self):
        assert get_voice_profile("socrates").discussion == "哲思：{subject}"

    def test_unknown_persona_gets_generic(self):
        assert get_voice_profile("custom_123") is GENERIC_PROFILE

    def test_unknown_category_uses_general(self):
        profile = VoiceProfile("d{subject}", "l{subject}", "s{subject}", "g{subject}")
        assert profile.template_for("general") == "g{subject}"
        assert profile.template_for("other") == "g{subject}"


class TestTitleFormatter:
    """Tests for TitleFormatter."""

    def setup_method(self):
        self.formatter = TitleFormatter()

    def test_entity_discussion(self):
        candidate = TitleCandidate.from_entity(EntityAction("智慧", "讨论", 2.0))
        assert self.formatter.format(candidate, "socrates", "苏格拉底") == "哲思：智慧"

    def test_entity_learning(self):
        candidate = TitleCandidate.from_entity(EntityAction("Python编程", "学习", 1.5))
        assert self.formatter.format(candidate, "einstein", "爱因斯坦") == "科学：Python编程"

    def test_entity_solving_generic(self):
        candidate = TitleCandidate.from_entity(EntityAction("失眠", "解决", 2.0))
        assert self.formatter.format(candidate, "custom_1", "小助手") == "解决失眠"

    def test_topic_uses_general_template(self):
        topic = TopicMatch("career", "工作职场", 1.0, ("工作",))
        candidate = TitleCandidate.from_topic(topic)
        assert candidate.category == "general"
        assert self.formatter.format(candidate, "confucius", "孔子") == "论工作"

    def test_generic_general_includes_name(self):
        topic = TopicMatch("career", "工作职场", 1.0, ("工作",))
        candidate = TitleCandidate.from_topic(topic)
        assert self.formatter.format(candidate, "custom_1", "小助手") == "小助手谈工作"

    def test_raw_prefixed_with_name(self):
        candidate = TitleCandidate.from_raw("今天天气不错啊")
        assert self.formatter.format(candidate, "confucius", "孔子") == "孔子：今天天气不错啊"

    def test_single_line(self):
        candidate = TitleCandidate.from_raw("第一行\n第二行")
        title = self.formatter.format(candidate, "confucius", "孔子")
        assert "\n" not in title
        assert title == "孔子：第一行 第二行"

    def test_custom_profile_lookup(self):
        formatter = TitleFormatter(lambda persona_id: VoiceProfile("D:{subject}", "L", "S", "G"))
        candidate = TitleCandidate.from_entity(EntityAction("猫", "聊聊", 2.0))
        assert formatter.format(candidate, "any", "某人") == "D:猫"
