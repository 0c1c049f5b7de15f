"""
Persona Model - Defines the character identities users chat with.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class PersonaBase(BaseModel):
    """Fields shared by built-in and custom personas."""
    name: str = Field(..., min_length=1, max_length=50)
    description: str = ""
    category: str = "自定义"
    personality: str = ""
    background: str = ""
    skills: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    language: Literal["zh", "en", "both"] = "zh"
    avatar: str = "🎭"
    prompt: Optional[str] = None  # Custom system prompt overrides the generated one


class PersonaCreate(PersonaBase):
    """Custom persona creation model; the id is derived when omitted."""
    id: Optional[str] = Field(None, pattern=r"^[a-z0-9][a-z0-9\-_]{0,63}$")


class Persona(PersonaBase):
    """Persona model with all fields."""
    id: str
    is_custom: bool = Field(False, alias="isCustom")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True
