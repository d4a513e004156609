"""Repository for User entity."""

from collections.abc import Iterable

from sqlalchemy import and_, or_
from sqlmodel import select

from src.workflow_alerts.models import User, UserRole
from src.workflow_alerts.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Read-only user lookups used by recipient resolution."""

    model = User

    async def find_active_by_names(self, names: Iterable[tuple[str, str]]) -> list[User]:
        """Active users whose first and last name exactly match one of the pairs."""
        conditions = [
            and_(User.first_name == first, User.last_name == last)  # type: ignore[arg-type]
            for first, last in names
        ]
        if not conditions:
            return []
        result = await self.session.execute(
            select(User).where(
                User.is_active == True,  # noqa: E712
                or_(*conditions),
            )
        )
        return list(result.scalars().all())

    async def find_active_by_roles(self, roles: Iterable[UserRole | str]) -> list[User]:
        """Active users holding any of the given roles."""
        values = [r.value if isinstance(r, UserRole) else r for r in roles]
        if not values:
            return []
        result = await self.session.execute(
            select(User).where(
                User.is_active == True,  # noqa: E712
                User.role.in_(values),  # type: ignore[attr-defined]
            )
        )
        return list(result.scalars().all())
