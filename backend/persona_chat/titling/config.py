"""
Title Scoring Configuration - Tunable constants for the title heuristics.

The values were picked empirically against short Chinese conversations.
They are kept together here so deployments can override them without
touching the extraction code.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TitleScoringConfig:
    """Scoring constants shared by the keyword, topic and entity analyzers."""

    # Keyword extraction
    keyword_min_length: int = 2
    keyword_max_length: int = 8
    keyword_limit: int = 5
    position_weight: float = 2.0
    length_bonus_short: float = 0.5   # 2 characters
    length_bonus_medium: float = 1.0  # 3-4 characters
    length_bonus_long: float = 0.2    # 5-8 characters
    importance_bonus: float = 3.0

    # Topic classification
    topic_limit: int = 2
    breadth_bonus: float = 0.5

    # Entity extraction
    entity_min_length: int = 2
    entity_max_length: int = 8
    entity_short_bonus: float = 1.0   # 2-4 characters
    entity_long_bonus: float = 0.5    # 5-8 characters
    entity_min_score: float = 1.0

    # Generator
    max_user_messages: int = 5
    fallback_verbatim_length: int = 12
    fallback_sentence_window: tuple = (6, 20)
    fallback_comma_window: tuple = (8, 18)
    fallback_truncate_length: int = 15
    fallback_ellipsis: str = "…"


DEFAULT_SCORING = TitleScoringConfig()
