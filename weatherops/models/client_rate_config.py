"""Per-client rate limit configuration."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ClientRateConfig(Base):
    __tablename__ = "client_rate_configs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    requests_per_minute: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
