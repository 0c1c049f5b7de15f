"""
Topic Classifier - Buckets conversation text into a fixed topic taxonomy.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_SCORING, TitleScoringConfig
from .keywords import clean_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopicBucket:
    """A topic with its weighted keyword list."""
    name: str
    label: str
    keywords: Tuple[str, ...]
    weight: float = 1.0


@dataclass(frozen=True)
class TopicMatch:
    """Classification result for one topic."""
    name: str
    label: str
    score: float
    matched_keywords: Tuple[str, ...]

    @property
    def subject(self) -> str:
        """Best phrase to put in a title: the leading matched keyword, else the label."""
        for keyword in self.matched_keywords:
            if len(keyword) >= 2:
                return keyword
        return self.label


# Declaration order is the tie-break order.
TOPIC_TABLE: Tuple[TopicBucket, ...] = (
    TopicBucket("programming", "编程技术", (
        "编程", "代码", "程序", "软件", "网站", "算法", "开发", "技术",
        "python", "javascript", "java", "bug", "数据库", "前端", "后端",
    ), 1.2),
    TopicBucket("education", "学习知识", (
        "学习", "知识", "课程", "读书", "考试", "老师", "学生", "学校",
        "作业", "教育", "学会", "复习",
    ), 1.0),
    TopicBucket("career", "工作职场", (
        "工作", "职业", "事业", "公司", "老板", "同事", "项目", "职场",
        "上班", "面试", "升职", "创业",
    ), 1.0),
    TopicBucket("relationships", "情感关系", (
        "爱情", "恋爱", "男友", "女友", "伴侣", "约会", "感情", "恋人",
        "朋友", "友谊", "家人", "相处", "婚姻",
    ), 1.0),
    TopicBucket("science", "科学探索", (
        "科学", "实验", "理论", "发现", "数学", "物理", "化学", "宇宙",
        "相对论", "量子", "自然", "生物",
    ), 1.1),
    TopicBucket("culture", "艺术文化", (
        "艺术", "绘画", "音乐", "电影", "文学", "诗歌", "创作", "文化",
        "戏剧", "小说", "书法", "诗词",
    ), 1.0),
    TopicBucket("philosophy", "哲学思考", (
        "哲学", "思考", "人生", "意义", "存在", "思想", "智慧", "真理",
        "人性", "思辨", "道德", "灵魂", "美德", "正义",
    ), 1.1),
    TopicBucket("daily_life", "日常生活", (
        "生活", "日常", "每天", "平时", "习惯", "家庭", "做饭", "旅行",
        "美食", "睡眠", "购物",
    ), 0.8),
    TopicBucket("history", "历史文化", (
        "历史", "古代", "朝代", "战争", "皇帝", "传统", "古典", "王朝",
    ), 1.0),
    TopicBucket("psychology", "心理情感", (
        "心理", "情绪", "压力", "焦虑", "开心", "难过", "心情", "孤独", "抑郁",
    ), 1.0),
    TopicBucket("health", "健康养生", (
        "健康", "身体", "锻炼", "运动", "饮食", "医生", "养生", "减肥",
    ), 0.9),
    TopicBucket("fantasy", "奇幻魔法", (
        "魔法", "巫师", "霍格沃茨", "咒语", "魔杖", "魁地奇", "魔咒",
    ), 1.0),
)


class TopicClassifier:
    """
    Weighted keyword matching against TOPIC_TABLE.

    score = sum(occurrences * weight) plus a breadth bonus for every extra
    distinct keyword of the same topic, so three different programming words
    beat one programming word repeated three times.
    """

    def __init__(
        self,
        table: Sequence[TopicBucket] = TOPIC_TABLE,
        config: TitleScoringConfig = DEFAULT_SCORING,
    ):
        self.table = tuple(table)
        self.config = config

    def classify(self, text: str, limit: Optional[int] = None) -> List[TopicMatch]:
        """
        Rank topics for the text.

        Args:
            text: Free text to classify
            limit: Maximum number of matches, defaults to the configured cap

        Returns:
            List[TopicMatch]: Matches sorted by score, empty when nothing matched
        """
        cleaned = clean_text(text)
        if not cleaned:
            return []

        matches: List[TopicMatch] = []
        for bucket in self.table:
            hits = []
            for keyword in bucket.keywords:
                count = cleaned.count(keyword.lower())
                if count > 0:
                    hits.append((keyword, count))
            if not hits:
                continue

            score = sum(count * bucket.weight for _, count in hits)
            if len(hits) > 1:
                score += self.config.breadth_bonus * (len(hits) - 1)

            # Stable sort keeps table order among equally frequent keywords
            ordered = sorted(hits, key=lambda hit: -hit[1])
            matches.append(TopicMatch(
                name=bucket.name,
                label=bucket.label,
                score=round(score, 4),
                matched_keywords=tuple(keyword for keyword, _ in ordered),
            ))

        # Stable sort: equal scores keep declaration order
        matches.sort(key=lambda match: -match.score)
        cap = limit if limit is not None else self.config.topic_limit

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Topic scores: {[(m.name, m.score) for m in matches]}")
        return matches[:cap]
