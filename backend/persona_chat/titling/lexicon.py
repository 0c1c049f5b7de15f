"""
Lexicon - Word lists used by the Chinese title heuristics.

These are configuration, not algorithm: a different locale can ship its own
lists and plug them into the analyzers.
"""

from typing import Dict, FrozenSet, Tuple

# Pronouns, auxiliaries, interrogatives and other filler that never make a title.
STOP_WORDS: FrozenSet[str] = frozenset({
    "的", "了", "是", "在", "有", "和", "与", "也", "都", "就", "要", "想",
    "会", "能", "很", "还", "吗", "呢", "吧", "啊", "我", "你", "他", "她",
    "它", "这", "那",
    "什么", "怎么", "为什么", "怎样", "怎么样", "如何", "哪些", "哪里", "哪个",
    "这个", "那个", "这些", "那些", "这样", "那样", "这么", "那么",
    "可以", "应该", "觉得", "认为", "关于", "我们", "你们", "他们", "她们",
    "它们", "自己", "一下", "一些", "有些", "还是", "就是", "但是", "因为",
    "所以", "如果", "然后", "或者", "而且", "不过", "非常", "真的", "请问",
    "有没有", "是不是", "能不能", "会不会", "可不可以", "一个", "一点",
    "建议", "问题", "东西", "事情", "知道", "告诉", "现在", "时候", "今天",
    "真正", "所谓", "到底", "其实", "已经", "需要", "希望", "打算", "想要",
})

# Single characters that separate content words inside an unspaced CJK run.
FUNCTION_CHARS: str = "的了是在有和与也都就很还又被把让给对从到为吗呢吧啊我你他她它这那想要会能跟同及或而"

# Latin tokens are only kept when they name something recognizable.
TECH_TERMS: FrozenSet[str] = frozenset({
    "python", "javascript", "java", "typescript", "rust", "golang", "go",
    "sql", "html", "css", "react", "vue", "linux", "ai", "api", "web",
    "app", "docker", "git", "gpt", "llm", "ios", "android", "excel",
})

# Domain-importance categories for the keyword score.
IMPORTANCE_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "technical": (
        "编程", "代码", "程序", "算法", "软件", "开发", "技术", "数据",
        "人工智能", "机器学习", "网络", "数据库", "前端", "后端", "网站",
        "python", "javascript", "java", "ai",
    ),
    "academic": (
        "学习", "研究", "理论", "知识", "考试", "论文", "数学", "物理",
        "化学", "历史", "哲学", "文学", "科学", "相对论", "宇宙",
    ),
    "business": (
        "工作", "职业", "事业", "公司", "管理", "市场", "投资", "创业",
        "经济", "项目", "团队", "面试", "战略",
    ),
    "lifestyle": (
        "生活", "健康", "运动", "饮食", "旅行", "美食", "朋友", "家庭",
        "睡眠", "爱情", "音乐", "电影", "诗歌",
    ),
    "abstract": (
        "智慧", "真理", "意义", "人生", "自由", "幸福", "道德", "正义",
        "存在", "梦想", "勇气", "美德", "命运", "友谊",
    ),
}

IMPORTANT_TERMS: FrozenSet[str] = frozenset(
    term for terms in IMPORTANCE_CATEGORIES.values() for term in terms
)

# Verbs recognized as the action of an entity/action pair, by title bucket.
ACTION_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "discussion": ("讨论", "探讨", "聊聊", "谈谈", "交流", "请教", "聊"),
    "learning": ("学习", "了解", "理解", "掌握", "研究", "认识", "学"),
    "solving": ("解决", "处理", "克服", "应对", "改善", "提高", "修复", "优化", "提升"),
}

DEFAULT_ACTION = "讨论"

# Leading words stripped from a captured entity phrase.
ENTITY_PREFIXES: Tuple[str, ...] = (
    "请问", "真正的", "所谓的", "一个", "一些", "这个", "那个", "我的", "你的",
    "有趣的", "好的", "重要的", "真正", "所谓", "一下", "一点",
)
