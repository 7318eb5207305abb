"""InsuranceCompany model — the insurer directory used for auto-generated quotes."""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from motorquote.models.base import Base, TimestampMixin


class InsuranceCompany(TimestampMixin, Base):
    """An insurer. Its `name` keys the rating-factor table."""

    __tablename__ = "insurance_companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    mobile_number: Mapped[str | None] = mapped_column(String(20))

    # Only active insurers take part in quote generation
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self) -> str:
        return f"<InsuranceCompany id={self.id} name={self.name!r} active={self.status}>"
