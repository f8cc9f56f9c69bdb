"""
Notes API: Notes Route Handlers
===============================

What:  GET /notes (list) and POST /notes (create).
How:   Takes the Database from the app dependency and delegates to
       NoteService; errors propagate to the global handlers.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends

from notes_api.database import Database, get_database
from notes_api.schemas.note import NoteCreated, NoteRead
from notes_api.schemas.system import ErrorResponse
from notes_api.services.note_service import note_service

router = APIRouter(tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteRead],
    responses={
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="List all notes, newest first",
)
async def list_notes(db: Database = Depends(get_database)) -> List[NoteRead]:
    return await note_service.list_notes(db)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteCreated,
    responses={
        400: {"description": "Missing or blank title", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Create a note",
    description=(
        'Body: {"title": "<text>"}. The title is trimmed before it is stored; '
        "a missing, non-string or blank title is rejected with 400."
    ),
)
async def create_note(
    payload: Any = Body(default=None),
    db: Database = Depends(get_database),
) -> NoteCreated:
    """
    Create a note from a JSON body.

    The body is accepted untyped so that every malformed shape (no body,
    a list, a numeric title) gets the same 400 "title is required" from
    NoteService.validate() instead of FastAPI's 422.
    """
    title = payload.get("title") if isinstance(payload, dict) else None
    return await note_service.create_note(db, title)
