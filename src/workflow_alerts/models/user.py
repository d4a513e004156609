"""User model - read-only from the engine's perspective."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.workflow_alerts.models.base import utc_now
from src.workflow_alerts.models.enums import UserRole


class User(SQLModel, table=True):
    """Staff account that can be assigned steps and receive notifications."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: str | None = Field(default=None, max_length=50)
    role: str = Field(default=UserRole.WORKER.value, max_length=50, index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
