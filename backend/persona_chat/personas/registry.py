"""
Persona Registry - Resolves persona ids to built-in or user-created personas.

Custom personas live under their own storage key as a JSON array. A custom
persona can never take the id of a built-in one.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..exceptions import PersonaChatError, PersonaConflictError, PersonaNotFoundError
from ..models import Persona, PersonaCreate
from ..storage.interface import StorageInterface
from ..titling import placeholder_title
from .builtin import BUILTIN_BY_ID, BUILTIN_PERSONAS

logger = logging.getLogger(__name__)

UNKNOWN_PERSONA_NAME = "未知角色"

LANGUAGE_NAMES = {"zh": "中文", "en": "英文"}

SYSTEM_PROMPT_TEMPLATE = """你是{name}，{description}。

个性特征: {personality}
背景信息: {background}
核心技能: {skills}

请始终保持以下角色特征：
1. 情境感知与适应：根据对话内容和用户情绪调整回应风格
2. 知识领域专精：在你的专业领域展现深度知识
3. 引导式学习：根据用户水平提供适当的信息和引导
4. 记忆与个性化：记住对话中的重要信息，建立个性化关系
5. 多语言交流：根据用户语言偏好智能切换，保持角色特色

请用{language}回应，保持{name}的说话风格和思维方式。回答要生动、有趣，体现角色的独特魅力。"""


def build_system_prompt(persona: Persona) -> str:
    """Custom prompt when the persona has one, otherwise the role template."""
    if persona.prompt and persona.prompt.strip():
        return persona.prompt

    skills = persona.skills or persona.tags
    return SYSTEM_PROMPT_TEMPLATE.format(
        name=persona.name,
        description=persona.description,
        personality=persona.personality,
        background=persona.background,
        skills="、".join(skills) if skills else "通用对话",
        language=LANGUAGE_NAMES.get(persona.language, "用户使用的语言"),
    )


class PersonaRegistry:
    """Lookup and management of personas."""

    def __init__(self, storage: StorageInterface, key: str = "custom_characters.json"):
        self.storage = storage
        self.key = key
        self._custom_names: Dict[str, str] = {}

    async def _load_custom(self) -> List[Persona]:
        content = await self.storage.load(self.key)
        if content is None:
            return []

        try:
            records = json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Custom personas under {self.key} are unreadable: {e}")
            return []

        if not isinstance(records, list):
            logger.error(f"Custom personas under {self.key} are not a list")
            return []

        personas = []
        for record in records:
            try:
                persona = Persona.model_validate(record)
            except ValueError as e:
                logger.warning(f"Skipping malformed custom persona: {e}")
                continue
            if persona.id in BUILTIN_BY_ID:
                logger.warning(f"Ignoring custom persona shadowing built-in id: {persona.id}")
                continue
            persona.is_custom = True
            personas.append(persona)
        self._custom_names = {p.id: p.name for p in personas}
        return personas

    async def _save_custom(self, personas: List[Persona]) -> bool:
        records = [p.model_dump(mode="json", by_alias=True, exclude_none=True) for p in personas]
        saved = await self.storage.save(self.key, json.dumps(records, ensure_ascii=False))
        if saved:
            self._custom_names = {p.id: p.name for p in personas}
        return saved

    async def list_personas(self) -> List[Persona]:
        """Built-in personas first, then custom ones in creation order."""
        return list(BUILTIN_PERSONAS) + await self._load_custom()

    async def get(self, persona_id: str) -> Optional[Persona]:
        if persona_id in BUILTIN_BY_ID:
            return BUILTIN_BY_ID[persona_id]
        for persona in await self._load_custom():
            if persona.id == persona_id:
                return persona
        return None

    async def require(self, persona_id: str) -> Persona:
        persona = await self.get(persona_id)
        if persona is None:
            raise PersonaNotFoundError(persona_id)
        return persona

    async def name_for(self, persona_id: str) -> str:
        persona = await self.get(persona_id)
        return persona.name if persona else UNKNOWN_PERSONA_NAME

    async def names(self) -> Dict[str, str]:
        """Map of every known persona id to its display name."""
        return {p.id: p.name for p in await self.list_personas()}

    def placeholder_title(self, persona_id: str, created_at: datetime) -> str:
        """
        Placeholder title for a stored session record that has none.

        Custom names come from the most recent load of the custom store.
        """
        if persona_id in BUILTIN_BY_ID:
            name = BUILTIN_BY_ID[persona_id].name
        else:
            name = self._custom_names.get(persona_id, UNKNOWN_PERSONA_NAME)
        return placeholder_title(name, created_at)

    async def create_custom(self, data: PersonaCreate) -> Persona:
        """
        Store a new custom persona.

        Raises:
            PersonaConflictError: if the id is taken
            PersonaChatError: if the custom store could not be written
        """
        customs = await self._load_custom()
        now = datetime.now(timezone.utc)
        persona_id = data.id or f"custom_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"

        if persona_id in BUILTIN_BY_ID or any(p.id == persona_id for p in customs):
            raise PersonaConflictError(f"Persona id already exists: {persona_id}")

        persona = Persona(
            **data.model_dump(exclude={"id"}),
            id=persona_id,
            is_custom=True,
            created_at=now,
        )
        customs.append(persona)
        if not await self._save_custom(customs):
            logger.error(f"Failed to persist custom persona {persona_id}")
            raise PersonaChatError(f"Failed to persist custom persona {persona_id}")

        logger.info(
            f"Created custom persona: {persona_id}",
            extra={"extra_fields": {"persona_id": persona_id, "persona_name": persona.name}},
        )
        return persona

    async def delete_custom(self, persona_id: str) -> bool:
        """
        Remove a custom persona. Built-in personas cannot be deleted.

        Raises:
            PersonaConflictError: for built-in ids
        """
        if persona_id in BUILTIN_BY_ID:
            raise PersonaConflictError(f"Built-in persona cannot be deleted: {persona_id}")

        customs = await self._load_custom()
        remaining = [p for p in customs if p.id != persona_id]
        if len(remaining) == len(customs):
            return False
        return await self._save_custom(remaining)

    @staticmethod
    def system_prompt(persona: Persona) -> str:
        return build_system_prompt(persona)
