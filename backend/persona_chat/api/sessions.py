"""
Session API endpoints - CRUD, messages, titling, import/export and storage usage.
"""

from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response, status
from typing import List, Optional

from ..core import SessionStore
from ..exceptions import PersonaNotFoundError
from ..models import (
    ImportResult, MessageCreate, Session, SessionCreate, SessionRename, SessionSummary, StorageInfo,
)
from ..titling import TitleAnalysis
from .dependencies import get_session_store

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Session not found: {session_id}")


def _analysis_payload(session_id: str, analysis: TitleAnalysis) -> dict:
    entity = analysis.entity
    return {
        "sessionId": session_id,
        "eligible": analysis.eligible,
        "keywords": analysis.keywords,
        "topics": [
            {"name": t.name, "label": t.label, "score": t.score, "matchedKeywords": list(t.matched_keywords)}
            for t in analysis.topics
        ],
        "entity": {
            "entity": entity.entity,
            "action": entity.action,
            "category": entity.category,
            "score": entity.score,
        } if entity else None,
        "path": analysis.candidate.kind if analysis.candidate else None,
        "suggestedTitle": analysis.title,
    }


@router.post("", response_model=Session, status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreate,
    store: SessionStore = Depends(get_session_store)
):
    """
    Create a session for a persona.

    Returns:
        The new session with a placeholder title unless one was given
    """
    try:
        return await store.create_session(body.persona_id, body.title)
    except PersonaNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=List[SessionSummary])
async def list_sessions(
    persona_id: Optional[str] = Query(None, description="Only sessions of this persona"),
    store: SessionStore = Depends(get_session_store)
):
    """Session summaries, most recently active first."""
    return await store.list_session_summaries(persona_id)


@router.delete("")
async def clear_sessions(store: SessionStore = Depends(get_session_store)):
    """Delete every session."""
    return {"deleted": await store.clear_all()}


@router.get("/export")
async def export_sessions(
    ids: Optional[List[str]] = Query(None, description="Session ids to export; all when omitted"),
    store: SessionStore = Depends(get_session_store)
):
    """Export sessions as a downloadable JSON document."""
    content = await store.export_sessions(ids)
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="sessions-export.json"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_sessions(
    request: Request,
    store: SessionStore = Depends(get_session_store)
):
    """
    Import an exported document (bare array, export envelope or id map).
    Nothing is stored unless the whole document is valid.
    """
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Import body must be UTF-8 JSON")

    result = await store.import_sessions(text)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return result


@router.get("/storage", response_model=StorageInfo)
async def storage_info(store: SessionStore = Depends(get_session_store)):
    """Advisory storage usage with a warning flag near capacity."""
    return await store.storage_info()


@router.get("/{session_id}", response_model=Session)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = await store.get_session(session_id)
    if session is None:
        raise _not_found(session_id)
    return session


@router.patch("/{session_id}", response_model=Session)
async def rename_session(
    session_id: str,
    body: SessionRename,
    store: SessionStore = Depends(get_session_store)
):
    """Rename a session; a manual title is never replaced automatically."""
    try:
        session = await store.rename_session(session_id, body.title)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if session is None:
        raise _not_found(session_id)
    return session


@router.delete("/{session_id}")
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Delete a session. Unknown ids are a no-op."""
    return {"deleted": await store.delete_session(session_id)}


@router.post("/{session_id}/messages", response_model=Session)
async def append_message(
    session_id: str,
    body: MessageCreate,
    store: SessionStore = Depends(get_session_store)
):
    """Append a message; titles the session once it qualifies."""
    session = await store.append_message(session_id, body.to_message())
    if session is None:
        raise _not_found(session_id)
    return session


@router.put("/{session_id}/messages/{message_id}", response_model=Session)
async def replace_message(
    session_id: str,
    message_id: str,
    body: MessageCreate,
    store: SessionStore = Depends(get_session_store)
):
    """Replace a message in place (edit or continued reply)."""
    session = await store.replace_message(session_id, message_id, body.to_message())
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Message {message_id} not found in session {session_id}"
        )
    return session


@router.post("/{session_id}/title", response_model=Session)
async def update_title(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Run the smart-title check now. Already titled sessions are unchanged."""
    session = await store.update_session_title(session_id)
    if session is None:
        raise _not_found(session_id)
    return session


@router.get("/{session_id}/analysis")
async def analyze_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Keywords, topics and entity the title generator sees for this session."""
    analysis = await store.analyze_session(session_id)
    if analysis is None:
        raise _not_found(session_id)
    return _analysis_payload(session_id, analysis)
