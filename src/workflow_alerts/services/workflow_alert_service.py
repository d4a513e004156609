"""Workflow scanner - finds steps that need alerts and sends them."""

import contextlib
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.workflow_alerts.core.alert_routing import AlertRoutingConfig, get_alert_routing
from src.workflow_alerts.core.logging import (
    bind_workflow_context,
    clear_workflow_context,
    get_logger,
)
from src.workflow_alerts.models import Notification, ProjectWorkflow
from src.workflow_alerts.models.base import Clock, utc_now
from src.workflow_alerts.repositories import ProjectRepository, ProjectTeam, WorkflowRepository
from src.workflow_alerts.services.alert_classifier import AlertAssessment, assess_step
from src.workflow_alerts.services.alert_history import AlertHistory, AlertKey
from src.workflow_alerts.services.events import StepTransitioned
from src.workflow_alerts.services.notification_builder import build_alert_notification
from src.workflow_alerts.services.notification_service import NotificationService
from src.workflow_alerts.services.recipient_resolver import RecipientResolver

logger = get_logger(__name__)


@dataclass
class ScanSummary:
    """Counters for one alert sweep."""

    workflows_checked: int = 0
    alerts_generated: int = 0
    workflows_skipped: int = 0
    orphans_removed: int = 0
    workflows_failed: int = 0


class WorkflowAlertService:
    """Checks workflows for due, urgent and overdue steps and notifies people.

    Workflows are processed one at a time. For each alerting step the alert
    history lock is held from the cooldown check until the step is marked as
    sent, so a step is alerted completely or not at all.
    """

    def __init__(
        self,
        session: AsyncSession,
        workflow_repo: WorkflowRepository,
        project_repo: ProjectRepository,
        recipient_resolver: RecipientResolver,
        alert_history: AlertHistory,
        notification_service: NotificationService,
        clock: Clock = utc_now,
        routing: AlertRoutingConfig | None = None,
    ):
        self.session = session
        self.workflow_repo = workflow_repo
        self.project_repo = project_repo
        self.recipient_resolver = recipient_resolver
        self.alert_history = alert_history
        self.notification_service = notification_service
        self.clock = clock
        self.routing = routing or get_alert_routing()

    async def check_and_send_alerts(self) -> ScanSummary:
        """Full sweep over every active workflow with steps.

        Never raises: a store failure ends the sweep early with whatever was
        counted so far.
        """
        summary = ScanSummary()
        logger.info("Alert check started")

        try:
            workflows = await self.workflow_repo.find_active_with_steps()
        except Exception as e:
            logger.error("Failed to load active workflows", error=str(e))
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return summary

        # Snapshot ids: a rollback below expires the loaded objects
        targets = [(w.id, w.project_id) for w in workflows]
        loaded = {w.id: w for w in workflows}

        for workflow_id, project_id in targets:
            bind_workflow_context(workflow_id, project_id)
            try:
                if not await self.project_repo.exists(project_id):
                    await self._remove_orphan(workflow_id, loaded.get(workflow_id))
                    summary.workflows_skipped += 1
                    summary.orphans_removed += 1
                    continue

                workflow = loaded.get(workflow_id) or await self.workflow_repo.get_with_steps(
                    workflow_id
                )
                if workflow is None:
                    summary.workflows_skipped += 1
                    continue

                alerts = await self.check_workflow_alerts(workflow)
                summary.workflows_checked += 1
                summary.alerts_generated += len(alerts)

            except Exception as e:
                logger.error("Alert check failed for workflow", error=str(e))
                summary.workflows_failed += 1
                with contextlib.suppress(Exception):
                    await self.session.rollback()
                loaded.clear()
            finally:
                clear_workflow_context()

        logger.info(
            "Alert check completed",
            workflows_checked=summary.workflows_checked,
            alerts_generated=summary.alerts_generated,
            workflows_skipped=summary.workflows_skipped,
            orphans_removed=summary.orphans_removed,
            workflows_failed=summary.workflows_failed,
        )
        return summary

    async def check_alerts_for_project(self, project_id: UUID) -> list[Notification]:
        """Sweep a single project's workflow, e.g. right after it was created."""
        try:
            workflow = await self.workflow_repo.get_by_project_id(project_id)
        except Exception as e:
            logger.error("Failed to load workflow for project", project_id=str(project_id), error=str(e))
            return []

        if workflow is None:
            logger.info("No workflow for project", project_id=str(project_id))
            return []

        alerts = await self.check_workflow_alerts(workflow)
        logger.info("Project alert check completed", project_id=str(project_id), alerts=len(alerts))
        return alerts

    async def trigger_initial_alerts(self, workflow_id: UUID) -> list[Notification]:
        """Check a freshly created workflow so steps already due alert at once."""
        try:
            workflow = await self.workflow_repo.get_with_steps(workflow_id)
        except Exception as e:
            logger.error("Failed to load workflow", workflow_id=str(workflow_id), error=str(e))
            return []

        if workflow is None:
            logger.warning("Workflow not found for initial alerts", workflow_id=str(workflow_id))
            return []

        alerts = await self.check_workflow_alerts(workflow)
        logger.info("Initial alerts generated", workflow_id=str(workflow_id), alerts=len(alerts))
        return alerts

    async def handle_step_transitioned(self, event: StepTransitioned) -> list[Notification]:
        """Re-check one workflow after one of its steps completed.

        Only alerts are sent from here, so the cascade ends after this hop.
        """
        logger.info(
            "Cascading alert check",
            workflow_id=str(event.workflow_id),
            completed_step_id=event.completed_step_id,
            next_step_id=event.next_step_id,
        )
        return await self.trigger_initial_alerts(event.workflow_id)

    async def check_workflow_alerts(
        self, workflow: ProjectWorkflow, team: ProjectTeam | None = None
    ) -> list[Notification]:
        """Send every alert this workflow currently needs.

        Returns:
            Notifications that were created
        """
        created: list[Notification] = []
        now = self.clock()

        assessments = [a for a in (assess_step(step, now) for step in workflow.steps) if a]
        if not assessments:
            return created

        if team is None:
            try:
                team = await self.project_repo.get_with_team(workflow.project_id)
            except Exception as e:
                logger.warning(
                    "Project lookup failed",
                    workflow_id=str(workflow.id),
                    project_id=str(workflow.project_id),
                    error=str(e),
                )
                return created

        if team is None:
            logger.warning(
                "Project not found for workflow",
                workflow_id=str(workflow.id),
                project_id=str(workflow.project_id),
            )
            return created

        for assessment in assessments:
            created.extend(await self._send_step_alert(workflow, team, assessment))

        logger.info("Workflow alerts checked", workflow_id=str(workflow.id), alerts=len(created))
        return created

    async def cleanup_alert_history(self, retention_days: int | None = None) -> int:
        """Drop alert history older than the retention window."""
        retention = timedelta(days=retention_days) if retention_days else None
        return await self.alert_history.purge(retention)

    async def cleanup_orphaned_workflows(self) -> int:
        """Delete every workflow whose project no longer exists.

        Returns:
            Number of workflows deleted (0 on failure)
        """
        try:
            removed = await self.workflow_repo.delete_orphaned()
            await self.session.commit()
        except Exception as e:
            logger.error("Orphaned workflow cleanup failed", error=str(e))
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return 0

        logger.info("Orphaned workflows cleaned up", removed=removed)
        return removed

    async def _send_step_alert(
        self, workflow: ProjectWorkflow, team: ProjectTeam, assessment: AlertAssessment
    ) -> list[Notification]:
        step = assessment.step
        key = AlertKey(workflow.id, step.step_id, assessment.tier)
        created: list[Notification] = []

        async with self.alert_history.lock(key):
            if await self.alert_history.has_recent_alert(key):
                logger.debug("Skipping recent alert", step_id=step.step_id, tier=assessment.tier.value)
                return created

            recipients = await self.recipient_resolver.resolve(step, assessment.tier, team)
            if not recipients:
                logger.warning(
                    "No recipients for alert",
                    step_id=step.step_id,
                    step_name=step.step_name,
                    tier=assessment.tier.value,
                )
                return created

            for recipient in recipients:
                notification = build_alert_notification(
                    workflow, assessment, team.project.project_name, recipient.id, self.routing
                )
                if await self.notification_service.create(notification) is not None:
                    created.append(notification)

            # Nothing delivered: leave unmarked so the next sweep retries
            if created:
                await self.alert_history.mark_sent(key)

        logger.info(
            "Alert sent",
            step_id=step.step_id,
            tier=assessment.tier.value,
            recipients=len(recipients),
            delivered=len(created),
        )
        return created

    async def _remove_orphan(self, workflow_id: UUID, workflow: ProjectWorkflow | None) -> None:
        if workflow is None:
            workflow = await self.workflow_repo.get_with_steps(workflow_id)
        if workflow is not None:
            await self.workflow_repo.delete(workflow)
            await self.session.commit()
        logger.info("Removed orphaned workflow", workflow_id=str(workflow_id))
