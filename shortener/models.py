"""SQLAlchemy ORM models for the URL shortener.

Data Model Layout
=================
::
    urls table
    ├─ short_id (VARCHAR(32) PRIMARY KEY)
    ├─ original_url (TEXT NOT NULL)
    └─ created_at (TIMESTAMPTZ, DEFAULT NOW())

Key Behaviours
===============
- short_id is the primary key, so the database enforces uniqueness.
- original_url is stored as given, without shape validation or length limit.
- created_at is managed by the database and never read by the service.
- Rows are never updated or deleted.

Classes:
    URL:  A short_id -> original_url mapping.
"""

import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from shortener.database import Base

__all__ = ["URL"]


class URL(Base):
    __tablename__ = "urls"

    short_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    original_url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<URL(short_id='{self.short_id}', original_url='{self.original_url}')>"
