"""Recipient resolution - who receives an alert for a step.

Resolution walks a fallback chain and stops at the first source that yields
anyone:

1. the step's direct assignee, if active
2. the named individuals designated for the step's responsible role
3. active users whose role belongs to the responsible role's group
4. all active management users

Urgent and overdue alerts then escalate: the project manager is added for
both, and overdue alerts also go to every management user. Recipients are
deduplicated by id. A failing lookup counts as an empty source and the chain
moves on.
"""

from collections.abc import Awaitable, Iterable

from src.workflow_alerts.core.alert_routing import AlertRoutingConfig, get_alert_routing
from src.workflow_alerts.core.exceptions import RecipientLookupError
from src.workflow_alerts.core.logging import get_logger
from src.workflow_alerts.models import AlertTier, User, WorkflowStep
from src.workflow_alerts.repositories import ProjectTeam, UserRepository

logger = get_logger(__name__)

ESCALATE_TO_PROJECT_MANAGER = (AlertTier.URGENT, AlertTier.OVERDUE)


class RecipientResolver:
    def __init__(self, user_repo: UserRepository, routing: AlertRoutingConfig | None = None):
        self.user_repo = user_repo
        self.routing = routing or get_alert_routing()

    async def resolve(
        self, step: WorkflowStep, tier: AlertTier, team: ProjectTeam | None = None
    ) -> list[User]:
        """Resolve the active users to alert for a step at a given tier.

        Args:
            step: The step being alerted on
            tier: Alert tier, drives escalation
            team: The step's project with manager and team; escalation to the
                  project manager is skipped without it

        Returns:
            Active users, deduplicated by id. May be empty.
        """
        recipients = await self._resolve_chain(step)

        if tier in ESCALATE_TO_PROJECT_MANAGER and team is not None:
            manager = team.project_manager
            if manager is not None and manager.is_active:
                recipients.append(manager)

        if tier == AlertTier.OVERDUE:
            recipients.extend(await self._management())

        return _dedupe(recipients)

    async def _resolve_chain(self, step: WorkflowStep) -> list[User]:
        if step.assigned_to_id is not None:
            assignee = await self._lookup("assignee", self._find_assignee(step))
            if assignee:
                return assignee

        responsible = step.default_responsible

        names = self.routing.names_for(responsible)
        if names:
            named = await self._lookup("named", self.user_repo.find_active_by_names(names))
            if named:
                return named

        roles = self.routing.roles_for(responsible)
        if roles:
            grouped = await self._lookup("role_group", self.user_repo.find_active_by_roles(roles))
            if grouped:
                return grouped

        return await self._management()

    async def _find_assignee(self, step: WorkflowStep) -> list[User]:
        user = await self.user_repo.get_by_id(step.assigned_to_id)  # type: ignore[arg-type]
        if user is None or not user.is_active:
            return []
        return [user]

    async def _management(self) -> list[User]:
        return await self._lookup(
            "management", self.user_repo.find_active_by_roles(self.routing.management_roles)
        )

    async def _lookup(self, source: str, query: Awaitable[list[User]]) -> list[User]:
        try:
            return list(await query)
        except Exception as e:
            error = RecipientLookupError(source, e)
            logger.warning("Recipient lookup failed", source=source, error=str(error))
            return []


def _dedupe(users: Iterable[User]) -> list[User]:
    seen = set()
    unique = []
    for user in users:
        if user.id in seen:
            continue
        seen.add(user.id)
        unique.append(user)
    return unique
