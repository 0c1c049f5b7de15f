"""
Voice Profiles - Persona-flavored title templates.

Templates use ``{subject}`` for the entity/topic and ``{name}`` for the
persona display name.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class VoiceProfile:
    """Title templates for one persona, one per action bucket."""
    discussion: str
    learning: str
    solving: str
    general: str

    def template_for(self, category: str) -> str:
        return getattr(self, category, self.general)


GENERIC_PROFILE = VoiceProfile(
    discussion="关于{subject}的讨论",
    learning="学习{subject}",
    solving="解决{subject}",
    general="{name}谈{subject}",
)

VOICE_PROFILES: Dict[str, VoiceProfile] = {
    "socrates": VoiceProfile(
        discussion="哲思：{subject}",
        learning="追问{subject}",
        solving="思辨：{subject}",
        general="哲思：{subject}",
    ),
    "confucius": VoiceProfile(
        discussion="师说：{subject}",
        learning="论学：{subject}",
        solving="问道：{subject}",
        general="论{subject}",
    ),
    "einstein": VoiceProfile(
        discussion="探讨{subject}",
        learning="科学：{subject}",
        solving="求解{subject}",
        general="科学：{subject}",
    ),
    "shakespeare": VoiceProfile(
        discussion="文学：{subject}",
        learning="文学：{subject}",
        solving="戏说{subject}",
        general="{subject}的诗篇",
    ),
    "harry-potter": VoiceProfile(
        discussion="霍格沃茨：{subject}",
        learning="魔法课：{subject}",
        solving="破解{subject}",
        general="魔法世界的{subject}",
    ),
    "laozi": VoiceProfile(
        discussion="论道：{subject}",
        learning="悟{subject}",
        solving="无为解{subject}",
        general="道说{subject}",
    ),
    "zhuangzi": VoiceProfile(
        discussion="逍遥谈{subject}",
        learning="悟{subject}",
        solving="寓言解{subject}",
        general="逍遥游：{subject}",
    ),
    "sunzi": VoiceProfile(
        discussion="兵法论{subject}",
        learning="兵法：{subject}",
        solving="谋略：{subject}",
        general="兵法论{subject}",
    ),
    "libai": VoiceProfile(
        discussion="诗酒话{subject}",
        learning="诗仙说{subject}",
        solving="对酒解{subject}",
        general="诗话：{subject}",
    ),
    "dufu": VoiceProfile(
        discussion="诗圣话{subject}",
        learning="诗史：{subject}",
        solving="忧思：{subject}",
        general="诗话：{subject}",
    ),
}


def get_voice_profile(persona_id: str) -> VoiceProfile:
    """Return the profile for the persona, or the generic one."""
    return VOICE_PROFILES.get(persona_id, GENERIC_PROFILE)
