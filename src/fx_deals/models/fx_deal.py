"""FxDeal model: one persisted FX transaction record."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from fx_deals.models.base import Base, CreatedAtMixin


class FxDeal(Base, CreatedAtMixin):
    """An imported FX deal. Rows are inserted once and never updated."""

    __tablename__ = "fx_deals"

    # BigInteger on PostgreSQL; SQLite only autoincrements INTEGER primary keys
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    deal_unique_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    from_currency_iso_code: Mapped[str] = mapped_column(String(3), nullable=False)
    to_currency_iso_code: Mapped[str] = mapped_column(String(3), nullable=False)
    deal_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deal_amount: Mapped[Decimal] = mapped_column(Numeric(19, 4, asdecimal=True), nullable=False)
