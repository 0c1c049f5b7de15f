"""
Unit tests for topic classification.
"""

from persona_chat.titling import TopicBucket, TopicClassifier


class TestTopicClassifier:
    """Tests for TopicClassifier."""

    def setup_method(self):
        self.classifier = TopicClassifier()

    def test_empty_text(self):
        assert self.classifier.classify("") == []

    def test_no_match(self):
        assert self.classifier.classify("今天天气不错啊") == []

    def test_programming(self):
        matches = self.classifier.classify("我想学Python编程，写代码总是有bug")
        assert matches[0].name == "programming"
        assert "编程" in matches[0].matched_keywords

    def test_breadth_beats_repetition(self):
        repeated = self.classifier.classify("编程编程")[0]
        broad = self.classifier.classify("编程代码")[0]
        assert broad.score > repeated.score

    def test_score_formula(self):
        match = self.classifier.classify("编程代码")[0]
        # 2 hits * 1.2 weight + 0.5 breadth bonus
        assert match.score == 2.9

    def test_capped_at_two(self):
        matches = self.classifier.classify("工作压力让我失眠，想学编程换个职业，也想多运动保持健康")
        assert len(matches) == 2

    def test_tie_keeps_table_order(self):
        matches = self.classifier.classify("工作压力")
        assert [m.name for m in matches] == ["career", "psychology"]
        assert matches[0].score == matches[1].score

    def test_tie_break_follows_declaration_order(self):
        cat = TopicBucket("cats", "猫", ("猫",), 1.0)
        dog = TopicBucket("dogs", "狗", ("狗",), 1.0)

        assert [m.name for m in TopicClassifier(table=[cat, dog]).classify("猫狗")] == ["cats", "dogs"]
        assert [m.name for m in TopicClassifier(table=[dog, cat]).classify("猫狗")] == ["dogs", "cats"]

    def test_subject_falls_back_to_label(self):
        bucket = TopicBucket("x", "某话题", ("猫",), 1.0)
        match = TopicClassifier(table=[bucket]).classify("猫")[0]
        assert match.subject == "某话题"
