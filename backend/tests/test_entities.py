"""
Unit tests for entity/action extraction.
"""

import pytest

from persona_chat.titling import EntityActionExtractor, TitleScoringConfig
from persona_chat.titling.entities import action_category


class TestActionCategory:
    """Tests for action bucket mapping."""

    @pytest.mark.parametrize("action,category", [
        ("讨论", "discussion"),
        ("聊聊", "discussion"),
        ("学习", "learning"),
        ("理解", "learning"),
        ("解决", "solving"),
        ("优化", "solving"),
        ("跳舞", "general"),
    ])
    def test_mapping(self, action, category):
        assert action_category(action) == category


class TestEntityActionExtractor:
    """Tests for EntityActionExtractor."""

    def setup_method(self):
        self.extractor = EntityActionExtractor()

    def test_empty_text(self):
        assert self.extractor.extract("") is None
        assert self.extractor.extract("  ") is None

    def test_no_pattern(self):
        assert self.extractor.extract("今天天气不错啊") is None

    def test_what_is(self):
        result = self.extractor.extract("什么是真正的智慧？")
        assert result.entity == "智慧"
        assert result.action == "讨论"
        assert result.category == "discussion"

    def test_learning_intent(self):
        result = self.extractor.extract("我想学习Python编程，有什么建议吗？")
        assert result.entity == "Python编程"
        assert result.action == "学习"
        assert result.category == "learning"
        assert result.score == 1.5

    @pytest.mark.parametrize("text,entity,action", [
        ("我想了解一下量子力学", "量子力学", "了解"),
        ("想学习一下书法", "书法", "学习"),
        ("我想了解一点历史", "历史", "了解"),
        ("我想要了解一下相对论的意义是什么", "相对论", "了解"),
    ])
    def test_filler_after_verb_trimmed(self, text, entity, action):
        result = self.extractor.extract(text)
        assert result.entity == entity
        assert result.action == action

    def test_stop_word_candidate_rejected(self):
        candidates = self.extractor.find_candidates("我想学习Python编程，有什么建议吗？")
        assert "建议" not in candidates

    def test_how_with_leading_verb(self):
        result = self.extractor.extract("如何理解真正的爱情？")
        assert result.entity == "爱情"
        assert result.action == "理解"

    def test_partner_phrase(self):
        result = self.extractor.extract("如何与朋友相处？")
        assert result.entity == "朋友"

    def test_which_pattern_trims_qualifier(self):
        result = self.extractor.extract("霍格沃茨有哪些有趣的魔法课程？")
        assert result.entity == "魔法课程"

    def test_about_pattern(self):
        result = self.extractor.extract("我想聊聊关于宇宙的问题")
        assert result.entity == "宇宙"

    def test_repetition_raises_score(self):
        once = self.extractor.extract("什么是智慧？")
        twice = self.extractor.extract("什么是智慧？智慧从哪里来？")
        assert twice.score > once.score

    def test_threshold(self):
        strict = EntityActionExtractor(TitleScoringConfig(entity_min_score=2.0))
        assert strict.extract("我想学习Python编程") is None

    def test_extract_action(self):
        assert self.extractor.extract_action("我想要了解宇宙") == "了解"
        assert self.extractor.extract_action("帮我解决这个bug") == "解决"
        assert self.extractor.extract_action("今天天气不错") is None

    def test_deterministic(self):
        text = "如何与朋友相处？"
        assert self.extractor.extract(text) == self.extractor.extract(text)
