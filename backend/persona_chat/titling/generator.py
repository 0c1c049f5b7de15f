"""
Smart Title Generator - Derives a session title from conversation content.

Pipeline: entity/action extraction, then topic classification, then a
punctuation-aware cut of the first user message. No LLM call is involved.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..models.session import Session
from .analyzer import ChineseTextAnalyzer, TextAnalyzer
from .config import DEFAULT_SCORING, TitleScoringConfig
from .entities import EntityAction
from .formatter import TitleCandidate, TitleFormatter
from .topics import TopicMatch

logger = logging.getLogger(__name__)

SENTENCE_END = "。？！?!"
COMMAS = "，,"
INTERIM_PREVIEW_LENGTH = 20

_PLACEHOLDER_RE = re.compile(r"的对话 - ")


def placeholder_title(persona_name: str, now: datetime) -> str:
    """Timestamp-based title given to a freshly created session."""
    return f"与{persona_name}的对话 - {now.month}月{now.day}日 {now:%H:%M}"


def interim_title(persona_name: str, message: str) -> str:
    """Title seeded from the first user message until the smart title lands."""
    text = " ".join(message.split())
    if len(text) > INTERIM_PREVIEW_LENGTH:
        text = text[:INTERIM_PREVIEW_LENGTH] + "..."
    return f"{persona_name}: {text}"


def is_default_title(
    title: str,
    persona_name: Optional[str] = None,
    first_user_message: Optional[str] = None,
) -> bool:
    """
    True when the title is still a placeholder or an interim title.

    Smart titles use the full-width colon, interim titles the ASCII
    ``"name: "`` form, so the two never collide. Passing the session's first
    user message also recognises an interim title seeded under a persona
    name that has since changed or disappeared.
    """
    if not title:
        return True
    if _PLACEHOLDER_RE.search(title):
        return True
    if first_user_message and first_user_message.strip():
        seeded_suffix = interim_title("", first_user_message)
        if title.endswith(seeded_suffix) and len(title) > len(seeded_suffix):
            return True
    if persona_name:
        return title.startswith(f"{persona_name}: ")
    return ": " in title


def shorten_message(message: str, config: TitleScoringConfig = DEFAULT_SCORING) -> str:
    """
    Cut a message to a short title body at a natural boundary.

    Windows are 1-based character positions, the way a reader counts them.
    """
    text = " ".join(message.split())
    if len(text) <= config.fallback_verbatim_length:
        return text

    start, end = config.fallback_sentence_window
    for i in range(start - 1, min(end, len(text))):
        if text[i] in SENTENCE_END:
            return text[:i + 1]

    start, end = config.fallback_comma_window
    for i in range(start - 1, min(end, len(text))):
        if text[i] in COMMAS:
            return text[:i]

    return text[:config.fallback_truncate_length] + config.fallback_ellipsis


@dataclass
class TitleAnalysis:
    """Everything the generator saw while titling a session."""
    eligible: bool
    keywords: List[str] = field(default_factory=list)
    topics: List[TopicMatch] = field(default_factory=list)
    entity: Optional[EntityAction] = None
    candidate: Optional[TitleCandidate] = None
    title: Optional[str] = None


class SmartTitleGenerator:
    """
    Orchestrates the analyzers and the formatter.
    Holds no state between calls; the one-shot guarantee lives in the
    caller's is_default_title check.
    """

    def __init__(
        self,
        analyzer: Optional[TextAnalyzer] = None,
        formatter: Optional[TitleFormatter] = None,
        config: TitleScoringConfig = DEFAULT_SCORING,
    ):
        self.config = config
        self.analyzer = analyzer or ChineseTextAnalyzer(config)
        self.formatter = formatter or TitleFormatter()

    @staticmethod
    def is_eligible(session: Session) -> bool:
        """At least two messages, with one from each side."""
        roles = [message.role for message in session.messages]
        return len(roles) >= 2 and "user" in roles and "character" in roles

    def user_texts(self, session: Session) -> List[str]:
        """First non-blank user messages, capped at max_user_messages."""
        texts = [m.content.strip() for m in session.messages if m.role == "user" and m.content.strip()]
        return texts[:self.config.max_user_messages]

    def generate(self, session: Session, persona_name: str) -> Optional[str]:
        """
        Generate a smart title for the session.

        Args:
            session: Session to title
            persona_name: Display name of the session's persona

        Returns:
            Optional[str]: The title, or None if the session does not qualify
        """
        return self.analyze(session, persona_name).title

    def analyze(self, session: Session, persona_name: str) -> TitleAnalysis:
        """Run the full pipeline and keep the intermediate results."""
        if not self.is_eligible(session):
            return TitleAnalysis(eligible=False)

        texts = self.user_texts(session)
        if not texts:
            logger.debug(f"Session {session.id} has only blank user messages")
            return TitleAnalysis(eligible=False)

        text = " ".join(texts)
        analysis = TitleAnalysis(eligible=True)
        analysis.keywords = self.analyzer.extract_keywords(text)
        analysis.topics = self.analyzer.classify_topics(text)
        analysis.entity = self.analyzer.extract_entity_action(text)

        if analysis.entity is not None:
            analysis.candidate = TitleCandidate.from_entity(analysis.entity)
        elif analysis.topics:
            top = analysis.topics[0]
            analysis.candidate = TitleCandidate.from_topic(top, self._topic_subject(top, analysis.keywords))
        else:
            analysis.candidate = TitleCandidate.from_raw(shorten_message(texts[0], self.config))

        analysis.title = self.formatter.format(analysis.candidate, session.persona_id, persona_name)
        logger.info(
            f"Generated title for session {session.id}",
            extra={"extra_fields": {
                "session_id": session.id,
                "persona_id": session.persona_id,
                "path": analysis.candidate.kind,
                "title": analysis.title,
            }}
        )
        return analysis

    @staticmethod
    def _topic_subject(topic: TopicMatch, keywords: List[str]) -> str:
        """Prefer the topic keyword the keyword extractor ranked highest."""
        for keyword in keywords:
            if keyword in topic.matched_keywords:
                return keyword
        return topic.subject
