"""Session ledger model: one row per successful sign-in, written once."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from beatbox.extensions import db


class SessionRecord(db.Model):
    __tablename__ = "user_sessions"
    __table_args__ = (
        db.Index("ix_user_sessions_user_sign_in_at", "user_id", "sign_in_at"),
        db.Index("ix_user_sessions_sign_in_at", "sign_in_at"),
    )

    id: Mapped[str] = mapped_column(db.String(64), primary_key=True)
    # Not a hard foreign key: sessions may outlive the identity row.
    user_id: Mapped[str] = mapped_column(db.String(64), nullable=False)
    email: Mapped[str] = mapped_column(db.String(255), nullable=False)
    sign_in_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(db.String(64))
    user_agent: Mapped[str | None] = mapped_column(db.Text)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
