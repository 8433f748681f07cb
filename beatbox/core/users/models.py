"""Identity model (owned by the identity provider, read by the core)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from beatbox.extensions import db


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class Identity(db.Model, TimestampMixin):
    """One authenticated principal. ``email`` is the only key the gate looks at."""

    __tablename__ = "user"

    id: Mapped[str] = mapped_column(db.String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(db.String(255), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(db.String(255))
    avatar_ref: Mapped[str | None] = mapped_column(db.String(1024))
