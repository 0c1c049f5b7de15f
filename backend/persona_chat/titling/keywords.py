"""
Keyword Extractor - Ranks the salient terms of a block of conversation text.
"""

import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from .config import DEFAULT_SCORING, TitleScoringConfig
from .lexicon import FUNCTION_CHARS, IMPORTANT_TERMS, STOP_WORDS, TECH_TERMS

logger = logging.getLogger(__name__)

_CLEAN_RE = re.compile(r"[^\w\s\u4e00-\u9fff]")
_SPACE_RE = re.compile(r"\s+")
_RUN_RE = re.compile(r"[\u4e00-\u9fff]+|[a-z0-9_]+")
_CJK_RE = re.compile(r"[\u4e00-\u9fff]")


def clean_text(text: str) -> str:
    """Drop punctuation and symbols, collapse whitespace and lowercase."""
    if not text:
        return ""
    cleaned = _CLEAN_RE.sub(" ", text)
    return _SPACE_RE.sub(" ", cleaned).strip().lower()


@dataclass(frozen=True)
class ScoredKeyword:
    """A keyword together with the score that ranked it."""
    term: str
    score: float


class KeywordExtractor:
    """
    Frequency/position/length/importance keyword ranking.

    Chinese text carries no spaces, so CJK runs are cut at function
    characters and multi-character stop words. Known domain terms are
    matched as substrings on top of that, which recovers words the naive
    cut would split.
    """

    def __init__(
        self,
        config: TitleScoringConfig = DEFAULT_SCORING,
        stop_words: FrozenSet[str] = STOP_WORDS,
        important_terms: FrozenSet[str] = IMPORTANT_TERMS,
        tech_terms: FrozenSet[str] = TECH_TERMS,
        function_chars: str = FUNCTION_CHARS,
    ):
        self.config = config
        self.stop_words = stop_words
        self.important_terms = important_terms
        self.tech_terms = tech_terms
        self._splitter = self._build_splitter(stop_words, function_chars)

    @staticmethod
    def _build_splitter(stop_words: Iterable[str], function_chars: str) -> re.Pattern:
        phrases = sorted(
            (w for w in stop_words if len(w) > 1 and _CJK_RE.search(w)),
            key=len,
            reverse=True,
        )
        parts = [re.escape(w) for w in phrases]
        if function_chars:
            parts.append(f"[{re.escape(function_chars)}]")
        return re.compile("|".join(parts))

    def extract(self, text: str, limit: Optional[int] = None) -> List[str]:
        """
        Return the top keywords of the text, best first.

        Args:
            text: Free text (typically the concatenated user messages)
            limit: Maximum number of keywords, defaults to the configured cap

        Returns:
            List[str]: Ranked keywords, empty when nothing survives filtering
        """
        return [kw.term for kw in self.score(text, limit)]

    def score(self, text: str, limit: Optional[int] = None) -> List[ScoredKeyword]:
        """Return ranked keywords with their scores."""
        cleaned = clean_text(text)
        if not cleaned:
            return []

        scored = []
        for token in self._candidates(cleaned):
            if not self._is_valid(token):
                continue
            scored.append((self._score_token(token, cleaned), cleaned.find(token), token))

        # Ties go to the term seen first
        scored.sort(key=lambda item: (-item[0], item[1], item[2]))
        cap = limit if limit is not None else self.config.keyword_limit
        result = [ScoredKeyword(term=token, score=round(s, 4)) for s, _, token in scored[:cap]]

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Keyword ranking: {[(k.term, k.score) for k in result]}")
        return result

    def _candidates(self, cleaned: str) -> List[str]:
        """Collect unique token candidates in order of first appearance."""
        seen = set()
        tokens = []

        def add(token: str) -> None:
            if token and token not in seen:
                seen.add(token)
                tokens.append(token)

        for run in _RUN_RE.findall(cleaned):
            if _CJK_RE.match(run):
                for piece in self._splitter.split(run):
                    add(piece)
            else:
                add(run)

        for term in sorted(self.important_terms):
            if term in cleaned:
                add(term)

        tokens.sort(key=lambda t: (cleaned.find(t), -len(t), t))
        return tokens

    def _is_valid(self, token: str) -> bool:
        if not (self.config.keyword_min_length <= len(token) <= self.config.keyword_max_length):
            return False
        if token in self.stop_words:
            return False
        if not _CJK_RE.search(token) and token not in self.tech_terms:
            return False
        return True

    def _score_token(self, token: str, cleaned: str) -> float:
        cfg = self.config
        frequency = cleaned.count(token)
        position = cfg.position_weight * (1 - cleaned.find(token) / len(cleaned))

        length = len(token)
        if length == 2:
            length_bonus = cfg.length_bonus_short
        elif length <= 4:
            length_bonus = cfg.length_bonus_medium
        else:
            length_bonus = cfg.length_bonus_long

        importance = cfg.importance_bonus if token in self.important_terms else 0.0
        return frequency + position + length_bonus + importance
