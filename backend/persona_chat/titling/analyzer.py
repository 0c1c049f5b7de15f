"""
Text Analyzer Interface - Abstract base for locale-specific title heuristics.
This interface lets the title generator run on another tokenizer or locale
table without changes to its orchestration.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .config import DEFAULT_SCORING, TitleScoringConfig
from .entities import EntityAction, EntityActionExtractor
from .keywords import KeywordExtractor
from .topics import TopicClassifier, TopicMatch


class TextAnalyzer(ABC):
    """
    Abstract text analyzer that defines the contract for the title pipeline.
    """

    @abstractmethod
    def extract_keywords(self, text: str) -> List[str]:
        """
        Rank the salient keywords of the text.

        Args:
            text: Free text

        Returns:
            List[str]: Keywords, best first
        """
        pass

    @abstractmethod
    def classify_topics(self, text: str) -> List[TopicMatch]:
        """
        Rank the topics the text belongs to.

        Args:
            text: Free text

        Returns:
            List[TopicMatch]: Topic matches, best first
        """
        pass

    @abstractmethod
    def extract_entity_action(self, text: str) -> Optional[EntityAction]:
        """
        Find the main entity of the text and the action attached to it.

        Args:
            text: Free text

        Returns:
            Optional[EntityAction]: None when extraction fails
        """
        pass


class ChineseTextAnalyzer(TextAnalyzer):
    """Default analyzer tuned for Chinese chat text with mixed punctuation."""

    def __init__(self, config: TitleScoringConfig = DEFAULT_SCORING):
        self.config = config
        self.keywords = KeywordExtractor(config)
        self.topics = TopicClassifier(config=config)
        self.entities = EntityActionExtractor(config)

    def extract_keywords(self, text: str) -> List[str]:
        return self.keywords.extract(text)

    def classify_topics(self, text: str) -> List[TopicMatch]:
        return self.topics.classify(text)

    def extract_entity_action(self, text: str) -> Optional[EntityAction]:
        return self.entities.extract(text)
