"""
Persona API endpoints - Built-in characters and user-created personas.
"""

from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from ..exceptions import PersonaChatError, PersonaConflictError
from ..models import Persona, PersonaCreate
from ..personas import PersonaRegistry
from .dependencies import get_persona_registry

router = APIRouter(prefix="/personas", tags=["personas"])


@router.get("", response_model=List[Persona])
async def list_personas(registry: PersonaRegistry = Depends(get_persona_registry)):
    """Built-in personas followed by custom ones."""
    return await registry.list_personas()


@router.post("", response_model=Persona, status_code=status.HTTP_201_CREATED)
async def create_persona(
    body: PersonaCreate,
    registry: PersonaRegistry = Depends(get_persona_registry)
):
    try:
        return await registry.create_custom(body)
    except PersonaConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PersonaChatError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{persona_id}", response_model=Persona)
async def get_persona(persona_id: str, registry: PersonaRegistry = Depends(get_persona_registry)):
    persona = await registry.get(persona_id)
    if persona is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Persona not found: {persona_id}")
    return persona


@router.delete("/{persona_id}")
async def delete_persona(persona_id: str, registry: PersonaRegistry = Depends(get_persona_registry)):
    """Delete a custom persona. Sessions that used it keep their history."""
    try:
        deleted = await registry.delete_custom(persona_id)
    except PersonaConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Persona not found: {persona_id}")
    return {"deleted": True}
