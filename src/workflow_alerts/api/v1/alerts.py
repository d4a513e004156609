"""Alert endpoints - manual triggers for the sweeps normally run on a schedule."""

from uuid import UUID

from fastapi import APIRouter

from src.workflow_alerts.api.dependencies import AlertHistoryDep, WorkflowAlertServiceDep
from src.workflow_alerts.models import Notification
from src.workflow_alerts.schemas import (
    AlertCheckResponse,
    HistoryCleanupResponse,
    NotificationRead,
    ScanSummaryRead,
)

router = APIRouter(tags=["alerts"])


def _check_response(notifications: list[Notification]) -> AlertCheckResponse:
    return AlertCheckResponse(
        alerts_generated=len(notifications),
        notifications=[NotificationRead.model_validate(n) for n in notifications],
    )


@router.post(
    "/alerts/check",
    response_model=ScanSummaryRead,
    summary="Run alert sweep",
    description="Check every active workflow and send the alerts that are due.",
)
async def check_all_alerts(service: WorkflowAlertServiceDep) -> ScanSummaryRead:
    summary = await service.check_and_send_alerts()
    return ScanSummaryRead.model_validate(summary)


@router.post(
    "/projects/{project_id}/alerts/check",
    response_model=AlertCheckResponse,
    summary="Check alerts for a project",
    description="Check a single project's workflow, e.g. right after it was created.",
)
async def check_project_alerts(
    project_id: UUID,
    service: WorkflowAlertServiceDep,
) -> AlertCheckResponse:
    return _check_response(await service.check_alerts_for_project(project_id))


@router.post(
    "/workflows/{workflow_id}/alerts/initial",
    response_model=AlertCheckResponse,
    summary="Trigger initial alerts",
    description="Send alerts for steps of a new workflow that are already due.",
)
async def trigger_initial_alerts(
    workflow_id: UUID,
    service: WorkflowAlertServiceDep,
) -> AlertCheckResponse:
    return _check_response(await service.trigger_initial_alerts(workflow_id))


@router.post(
    "/alerts/history/cleanup",
    response_model=HistoryCleanupResponse,
    summary="Purge alert history",
    description="Drop alert history past the retention window (normally a daily job).",
)
async def cleanup_alert_history(alert_history: AlertHistoryDep) -> HistoryCleanupResponse:
    return HistoryCleanupResponse(removed=await alert_history.purge())
