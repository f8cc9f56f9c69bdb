"""
Notes API: Note Service (Notes Store)
=====================================

What:  Validation, creation and listing of notes against the pooled database.
How:   Each operation leases exactly one connection from the Database it is
       given, issues one statement, and returns the connection on exit.
Who:   Called by the /notes route handlers.

Flow (POST /notes):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Route   │───▶│  NoteCreate  │───▶│ lease conn + │───▶│ release  │
    │ (title)  │    │  (validate)  │    │ INSERT/COMMIT│    │   conn   │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Validation fails  → ValidationError ("title is required"), no lease taken
    Any storage error → StorageError ("Failed to create note")

NoteService is stateless; the Database is passed in on every call.
"""

import logging
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import insert, select

from notes_api.database import Database
from notes_api.exceptions import StorageError, ValidationError
from notes_api.models.note import Note
from notes_api.schemas.note import NoteCreate, NoteCreated, NoteRead

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes(): every stored note, newest identity first
        - create_note(): validate a candidate title and insert it

    Error Handling Strategy:
        Any failure while a connection is leased (connect error, pool wait
        timeout, query error) is logged with its cause and re-raised as
        StorageError with an operation-level message. The driver detail is
        kept in the exception context, never in the message.
    """

    @staticmethod
    def validate(title: Any) -> NoteCreate:
        """
        Parse a candidate title into a NoteCreate command.

        Args:
            title: Whatever the client sent (may be None or a non-string).

        Raises:
            ValidationError: title is not a string, or is blank after trimming.
        """
        try:
            return NoteCreate(title=title)
        except PydanticValidationError:
            raise ValidationError(message="title is required", field="title")

    async def list_notes(self, db: Database) -> List[NoteRead]:
        """
        Return all notes ordered by id, descending.

        Query:
            SELECT id, title, created_at FROM notes ORDER BY id DESC

        Returns:
            List of NoteRead; empty when the table has no rows.

        Raises:
            StorageError: "Failed to fetch notes".
        """
        query = select(Note.id, Note.title, Note.created_at).order_by(Note.id.desc())

        try:
            async with db.connection() as conn:
                result = await conn.execute(query)
                rows = result.mappings().all()
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch notes",
                context={"error_type": type(e).__name__},
            ) from e

        return [NoteRead.model_validate(dict(row)) for row in rows]

    async def create_note(self, db: Database, title: Any) -> NoteCreated:
        """
        Validate and persist a new note.

        Args:
            db: Application Database (connection pool).
            title: Candidate title, any type.

        Returns:
            NoteCreated with the identity assigned by the storage engine and
            the trimmed title that was stored.

        Raises:
            ValidationError: "title is required" (nothing is written).
            StorageError: "Failed to create note".
        """
        command = self.validate(title)

        try:
            async with db.connection() as conn:
                result = await conn.execute(insert(Note).values(title=command.title))
                await conn.commit()
                note_id = result.inserted_primary_key[0]
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create note",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note %s created", note_id)
        return NoteCreated(id=note_id, title=command.title)


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
