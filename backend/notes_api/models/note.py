"""
Notes API: Note SQLAlchemy Model
================================

What:  ORM mapping of the `notes` table.
Who:   Used by NoteService for inserts and listings, and by
       Database.create_schema() for local table creation.

Table Design:
    - id: integer autoincrement key assigned by the storage engine; listings
      are ordered by it, newest first
    - title: trimmed, non-empty text (enforced before insert by NoteCreate)
    - created_at: UTC insertion time; filled on the Python side and by the
      server default for rows written outside this service
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


class Note(Base):
    """
    A titled note.

    Lifecycle:
        Created once by POST /notes, read by GET /notes. There is no update
        or delete path, so rows are immutable once written.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
