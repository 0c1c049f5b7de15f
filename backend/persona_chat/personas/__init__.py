"""Personas module - built-in characters and the custom persona registry."""

from .builtin import BUILTIN_PERSONAS, BUILTIN_BY_ID
from .registry import PersonaRegistry, UNKNOWN_PERSONA_NAME, build_system_prompt

__all__ = [
    'BUILTIN_PERSONAS', 'BUILTIN_BY_ID',
    'PersonaRegistry', 'UNKNOWN_PERSONA_NAME', 'build_system_prompt',
]
