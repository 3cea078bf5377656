from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, validates

from .base import Base
from .utils import normalize_identity


class Deployment(Base):
    """The single provisioned engine instance and its immutable admin identity."""

    __tablename__ = "deployments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    engine_address: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    admin_address: Mapped[str] = mapped_column(String(64), nullable=False)
    default_ticket_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    network: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @validates("engine_address", "admin_address")
    def _normalize_address(self, _key: str, value: str) -> str:
        return normalize_identity(value)

    def __repr__(self) -> str:
        return (
            f"<Deployment(id={self.id}, engine_address={self.engine_address}, "
            f"admin_address={self.admin_address})>"
        )

    @classmethod
    def current(cls, session: Session) -> Optional["Deployment"]:
        """Return the provisioned deployment, if any."""
        return session.scalars(select(cls).order_by(cls.id.asc())).first()
