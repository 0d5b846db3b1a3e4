from __future__ import annotations

from sqlalchemy import BigInteger, Float, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: action_record
# ---------------------------


class ActionRecord(Base):
    """A logged discrete event (cigarette, beer, food) at a wall-clock instant.

    ``type`` is a free-form tag; the application uses ``"cigarette"``,
    ``"beer"`` and ``"comida"``. ``timestamp`` is milliseconds since the epoch.
    Rows are immutable once written; they are only ever deleted.
    """

    __tablename__ = "action_record"

    # INTEGER PRIMARY KEY keeps SQLite rowid semantics for auto-assigned ids.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Added in schema version 2.
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return (
            f"ActionRecord(id={self.id!r}, type={self.type!r}, "
            f"timestamp={self.timestamp!r}, description={self.description!r})"
        )


# ---------------------------
# Core: daily_expense
# ---------------------------


class DailyExpense(Base):
    __tablename__ = "daily_expense"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Positivity is enforced at entry by the expense view-state holder, not here.
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Payment source tag; nullable because early rows predate the field.
    origin: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return (
            f"DailyExpense(id={self.id!r}, amount={self.amount!r}, "
            f"category={self.category!r}, date={self.date!r}, "
            f"note={self.note!r}, origin={self.origin!r})"
        )


__all__ = [
    "Base",
    "ActionRecord",
    "DailyExpense",
]
