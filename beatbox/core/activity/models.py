"""Activity ledger model: append-only user actions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from beatbox.extensions import db


class ActivityEvent(db.Model):
    __tablename__ = "user_activity"
    __table_args__ = (
        db.Index("ix_user_activity_user_timestamp", "user_id", "timestamp"),
        db.Index("ix_user_activity_type_timestamp", "activity_type", "timestamp"),
    )

    id: Mapped[str] = mapped_column(db.String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(db.String(64), nullable=False)
    activity_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(db.String(255))
    page_url: Mapped[str | None] = mapped_column(db.Text)
    action: Mapped[str | None] = mapped_column(db.String(255))
    session_id: Mapped[str | None] = mapped_column(db.String(64))
    # ``metadata`` is reserved on declarative classes.
    details: Mapped[dict] = mapped_column("metadata", db.JSON, nullable=False, default=dict)
