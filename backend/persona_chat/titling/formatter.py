"""
Title Formatter - Renders a title candidate in the persona's voice.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .entities import EntityAction, action_category
from .topics import TopicMatch
from .voice_profiles import VoiceProfile, get_voice_profile

logger = logging.getLogger(__name__)

FALLBACK_SEPARATOR = "："


@dataclass(frozen=True)
class TitleCandidate:
    """
    Intermediate result of the title generator.

    kind is "entity", "topic" or "raw"; subject is the phrase that ends up
    in the title.
    """
    kind: str
    subject: str
    action: Optional[str] = None
    topic: Optional[TopicMatch] = None

    @classmethod
    def from_entity(cls, entity_action: EntityAction) -> "TitleCandidate":
        return cls(kind="entity", subject=entity_action.entity, action=entity_action.action)

    @classmethod
    def from_topic(cls, topic: TopicMatch, subject: Optional[str] = None) -> "TitleCandidate":
        return cls(kind="topic", subject=subject or topic.subject, topic=topic)

    @classmethod
    def from_raw(cls, message: str) -> "TitleCandidate":
        return cls(kind="raw", subject=message)

    @property
    def category(self) -> str:
        if self.kind == "entity":
            return action_category(self.action or "")
        return "general"


class TitleFormatter:
    """Selects a voice-profile template and substitutes the subject."""

    def __init__(self, profile_lookup: Callable[[str], VoiceProfile] = get_voice_profile):
        self.profile_lookup = profile_lookup

    def format(self, candidate: TitleCandidate, persona_id: str, persona_name: str) -> str:
        """
        Render a single-line title.

        Args:
            candidate: Entity, topic or raw-message candidate
            persona_id: Persona identifier used to pick the voice profile
            persona_name: Display name of the persona

        Returns:
            str: The title
        """
        subject = _single_line(candidate.subject)
        if candidate.kind == "raw":
            return f"{persona_name}{FALLBACK_SEPARATOR}{subject}"

        profile = self.profile_lookup(persona_id)
        template = profile.template_for(candidate.category)
        title = _single_line(template.format(subject=subject, name=persona_name))
        logger.debug(f"Formatted {candidate.kind} title for {persona_id}: {title}")
        return title


def _single_line(text: str) -> str:
    return " ".join(text.split())
