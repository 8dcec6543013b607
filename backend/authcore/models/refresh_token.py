"""Persisted refresh token rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from authcore.core.extensions import db

from .base import ReprMixin, TimestampMixin


class RefreshToken(ReprMixin, TimestampMixin, db.Model):
    """
    Server-side record of an issued refresh token.

    The row is written once at issuance; afterwards only ``is_revoked`` may
    change, and only from ``False`` to ``True``.

    Fields
    ------
    id : str
        Record identifier, equal to the token's ``jti`` claim.
    token : str
        Signed refresh token. Unique.
    user_id : str
        Owning subject. Indexed for logout-everywhere.
    issued_at / expires_at : datetime
        Validity window (UTC).
    is_revoked : bool
        Monotonic revocation flag.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    token: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("token", name="uq_refresh_tokens_token"),
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
