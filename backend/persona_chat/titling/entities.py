"""
Entity/Action Extractor - Finds what a conversation is about and what the
user wants to do with it.

Chat messages rarely contain a clean subject-verb-object sentence, so
instead of parsing we look for the connective phrases people actually use:
"关于X的", "什么是X", "如何X", "学习X", "想要X".
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .config import DEFAULT_SCORING, TitleScoringConfig
from .lexicon import ACTION_CATEGORIES, DEFAULT_ACTION, ENTITY_PREFIXES, STOP_WORDS

logger = logging.getLogger(__name__)

_PHRASE = r"[\u4e00-\u9fffA-Za-z0-9]"
_HAS_WORD_RE = re.compile(r"[\u4e00-\u9fffA-Za-z]")

LEADING_FILLER_CHARS = "我你他她想要请这那就也还"
TRAILING_PARTICLES = "吗呢吧啊呀么的了"
LEADING_VERBS: Tuple[str, ...] = tuple(
    verb for verbs in ACTION_CATEGORIES.values() for verb in verbs
) + (
    "看待", "面对", "成为", "做好", "使用", "选择", "培养", "保持", "找到",
    "开始", "知道", "做", "写", "用",
)

ENTITY_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("about", rf"关于(?P<entity>{_PHRASE}{{1,12}}?)(?:的|方面|[，。？！,.?!\s]|$)"),
    ("with_partner", rf"(?:与|和|跟|同)(?P<entity>{_PHRASE}{{1,6}}?)(?:相处|交往|沟通|交流|合作|聊天|共事)"),
    ("what_is", rf"什么(?:是|叫)(?P<entity>{_PHRASE}{{1,12}})"),
    ("is_what", rf"(?P<entity>{_PHRASE}{{1,12}}?)(?:是什么|是啥|指什么|什么意思)"),
    ("how", rf"(?:如何|怎么样|怎么|怎样)(?P<entity>{_PHRASE}{{1,12}})"),
    ("learn", rf"(?:学习|学会|了解|研究|掌握)(?P<entity>{_PHRASE}{{1,12}})"),
    ("discuss", rf"(?:讨论|探讨|聊聊|谈谈|说说|讲讲|介绍)(?:一下)?(?P<entity>{_PHRASE}{{1,12}})"),
    ("aspect", rf"(?P<entity>{_PHRASE}{{1,12}}?)的(?:意义|本质|含义|区别|原理|历史|未来|价值|秘密)"),
    ("which", rf"有(?:哪些|什么)(?P<entity>{_PHRASE}{{1,12}})"),
)

_VERBS = "|".join(sorted(
    (verb for verbs in ACTION_CATEGORIES.values() for verb in verbs),
    key=len,
    reverse=True,
))

ACTION_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("intent", rf"(?:想要|需要|希望|打算|准备|想)(?:去|来|好好)?(?P<action>{_VERBS})"),
    ("question", rf"(?:如何|怎么|怎样)(?P<action>{_VERBS})"),
    ("request", rf"(?:帮我|请你|一起|我们来)(?P<action>{_VERBS})"),
    ("leading", rf"(?:^|[\s，。？！,.?!])(?P<action>{_VERBS})"),
)


def action_category(action: str) -> str:
    """Map an action verb to its title bucket: discussion, learning, solving or general."""
    for category, verbs in ACTION_CATEGORIES.items():
        if action in verbs:
            return category
    return "general"


@dataclass(frozen=True)
class EntityAction:
    """A salient noun phrase and the verb associated with it."""
    entity: str
    action: str
    score: float

    @property
    def category(self) -> str:
        return action_category(self.action)


class EntityActionExtractor:
    """Pattern-based entity/action extraction with occurrence/length scoring."""

    def __init__(
        self,
        config: TitleScoringConfig = DEFAULT_SCORING,
        entity_patterns: Sequence[Tuple[str, str]] = ENTITY_PATTERNS,
        action_patterns: Sequence[Tuple[str, str]] = ACTION_PATTERNS,
        stop_words: FrozenSet[str] = STOP_WORDS,
        default_action: str = DEFAULT_ACTION,
    ):
        self.config = config
        self.entity_patterns = [(name, re.compile(p)) for name, p in entity_patterns]
        self.action_patterns = [(name, re.compile(p)) for name, p in action_patterns]
        self.stop_words = stop_words
        self.default_action = default_action
        self._prefixes = sorted(ENTITY_PREFIXES + LEADING_VERBS, key=len, reverse=True)

    def extract(self, text: str) -> Optional[EntityAction]:
        """
        Extract the best entity and its action from the text.

        Args:
            text: Concatenated user messages

        Returns:
            Optional[EntityAction]: None when no candidate scores above the threshold
        """
        if not text or not text.strip():
            return None

        candidates = self.find_candidates(text)
        if not candidates:
            logger.debug("No entity candidates found")
            return None

        lowered = text.lower()
        best_entity = None
        best_score = 0.0
        # Candidates are in discovery order, so strict > keeps the earliest on ties
        for candidate in candidates:
            score = self._score(candidate, lowered)
            if score > best_score:
                best_entity, best_score = candidate, score

        if best_entity is None or best_score <= self.config.entity_min_score:
            logger.debug(f"Entity candidates below threshold: {candidates}")
            return None

        action = self.extract_action(text) or self.default_action
        result = EntityAction(entity=best_entity, action=action, score=best_score)
        logger.debug(f"Extracted entity={result.entity}, action={result.action}, score={result.score}")
        return result

    def find_candidates(self, text: str) -> List[str]:
        """Return trimmed, de-duplicated entity candidates in discovery order."""
        found: Dict[str, int] = {}
        for _, pattern in self.entity_patterns:
            for match in pattern.finditer(text):
                candidate = self._trim(match.group("entity"))
                if self._is_candidate(candidate) and candidate not in found:
                    found[candidate] = len(found)
        return list(found)

    def extract_action(self, text: str) -> Optional[str]:
        """Return the first action verb matched by the ordered action patterns."""
        for _, pattern in self.action_patterns:
            match = pattern.search(text)
            if match:
                return match.group("action")
        return None

    def _trim(self, phrase: str) -> str:
        """Strip filler, qualifiers and a leading verb from a captured phrase."""
        changed = True
        while changed and phrase:
            changed = False
            for prefix in self._prefixes:
                if phrase.startswith(prefix) and len(phrase) - len(prefix) >= 2:
                    phrase = phrase[len(prefix):]
                    changed = True
                    break
            else:
                if phrase[0] in LEADING_FILLER_CHARS and len(phrase) > 2:
                    phrase = phrase[1:]
                    changed = True
        return phrase.rstrip(TRAILING_PARTICLES)

    def _is_candidate(self, candidate: str) -> bool:
        if not (self.config.entity_min_length <= len(candidate) <= self.config.entity_max_length):
            return False
        if candidate in self.stop_words:
            return False
        return bool(_HAS_WORD_RE.search(candidate))

    def _score(self, candidate: str, lowered_text: str) -> float:
        score = float(lowered_text.count(candidate.lower()))
        if len(candidate) <= 4:
            score += self.config.entity_short_bonus
        else:
            score += self.config.entity_long_bonus
        return score
