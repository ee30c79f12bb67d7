from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ClubModel(Base):
    __tablename__ = 'club'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class AffiliationModel(Base):
    """Principal <-> club membership; the earliest row is the principal's managed club."""

    __tablename__ = 'affiliation'
    __table_args__ = (UniqueConstraint('principal_id', 'club_id', name='uq_affiliation_pair'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    principal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('principal.id', ondelete='CASCADE'), nullable=False, index=True
    )
    club_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('club.id', ondelete='CASCADE'), nullable=False, index=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
