"""
ORM models.

One generic key/value table. The search history lives under a single key as
a JSON-encoded array, so every write replaces the whole value.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class StoredValue(Base):
    __tablename__ = "stored_values"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
