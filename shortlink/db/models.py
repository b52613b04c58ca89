"""
Database Models

Link: the mapping between a short code and the original URL, plus the
number of successful redirects through it.

Indexes:
- short_code: unique index, every redirect and stats call looks it up
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import String, DateTime, Integer, Text

from shortlink.core.validators import MAX_SHORT_CODE_LENGTH


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(SQLModel, table=True):
    """
    Link record.

    Fields:
    - id: Auto-incrementing primary key
    - original_url: Destination, stored exactly as submitted
    - short_code: Random URL-safe code, unique
    - clicks: Successful redirects, starts at zero
    - created_at: Timestamp when the link was created
    """
    __tablename__ = "urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    short_code: str = Field(
        sa_column=Column(String(MAX_SHORT_CODE_LENGTH), nullable=False, unique=True, index=True)
    )
    clicks: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0")
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
