from src.workflow_alerts.services.alert_classifier import AlertAssessment, assess_step, classify
from src.workflow_alerts.services.alert_history import (
    AlertHistory,
    AlertKey,
    InMemoryAlertHistoryBackend,
    RedisAlertHistoryBackend,
    get_alert_history,
)
from src.workflow_alerts.services.events import StepTransitioned
from src.workflow_alerts.services.notification_service import NotificationService
from src.workflow_alerts.services.recipient_resolver import RecipientResolver
from src.workflow_alerts.services.workflow_alert_service import ScanSummary, WorkflowAlertService
from src.workflow_alerts.services.workflow_completion_service import (
    StepCompletionResult,
    SubTaskCompletionResult,
    WorkflowCompletionService,
)

__all__ = [
    "AlertAssessment",
    "AlertHistory",
    "AlertKey",
    "InMemoryAlertHistoryBackend",
    "NotificationService",
    "RecipientResolver",
    "RedisAlertHistoryBackend",
    "ScanSummary",
    "StepCompletionResult",
    "StepTransitioned",
    "SubTaskCompletionResult",
    "WorkflowAlertService",
    "WorkflowCompletionService",
    "assess_step",
    "classify",
    "get_alert_history",
]
