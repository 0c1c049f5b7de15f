"""Titling module - heuristic session-title inference without LLM calls."""

from .analyzer import ChineseTextAnalyzer, TextAnalyzer
from .config import DEFAULT_SCORING, TitleScoringConfig
from .entities import EntityAction, EntityActionExtractor
from .formatter import TitleCandidate, TitleFormatter
from .generator import (
    SmartTitleGenerator,
    TitleAnalysis,
    interim_title,
    is_default_title,
    placeholder_title,
    shorten_message,
)
from .keywords import KeywordExtractor, ScoredKeyword
from .topics import TOPIC_TABLE, TopicBucket, TopicClassifier, TopicMatch
from .voice_profiles import GENERIC_PROFILE, VOICE_PROFILES, VoiceProfile, get_voice_profile

__all__ = [
    'ChineseTextAnalyzer', 'TextAnalyzer',
    'DEFAULT_SCORING', 'TitleScoringConfig',
    'EntityAction', 'EntityActionExtractor',
    'TitleCandidate', 'TitleFormatter',
    'SmartTitleGenerator', 'TitleAnalysis',
    'interim_title', 'is_default_title', 'placeholder_title', 'shorten_message',
    'KeywordExtractor', 'ScoredKeyword',
    'TOPIC_TABLE', 'TopicBucket', 'TopicClassifier', 'TopicMatch',
    'GENERIC_PROFILE', 'VOICE_PROFILES', 'VoiceProfile', 'get_voice_profile',
]
