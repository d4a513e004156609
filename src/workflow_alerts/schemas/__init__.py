from src.workflow_alerts.schemas.alert import (
    AlertCheckResponse,
    HistoryCleanupResponse,
    NotificationRead,
    ScanSummaryRead,
)
from src.workflow_alerts.schemas.workflow import (
    CompletionRequest,
    StepCompletionResponse,
    StepRead,
    SubTaskCompletionResponse,
    SubTaskRead,
    WorkflowRead,
)

__all__ = [
    # Alerts
    "AlertCheckResponse",
    "HistoryCleanupResponse",
    "NotificationRead",
    "ScanSummaryRead",
    # Workflows
    "CompletionRequest",
    "StepCompletionResponse",
    "StepRead",
    "SubTaskCompletionResponse",
    "SubTaskRead",
    "WorkflowRead",
]
