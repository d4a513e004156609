"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user account."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    FOREMAN = "FOREMAN"
    WORKER = "WORKER"
    FIELD_DIRECTOR = "FIELD_DIRECTOR"
    OFFICE = "OFFICE"
    ADMINISTRATION = "ADMINISTRATION"


class ResponsibleRole(str, Enum):
    """Role token naming who is responsible for a workflow step by default."""

    OFFICE = "OFFICE"
    ADMINISTRATION = "ADMINISTRATION"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    FIELD_DIRECTOR = "FIELD_DIRECTOR"
    ROOF_SUPERVISOR = "ROOF_SUPERVISOR"


class ProjectPhase(str, Enum):
    """Project phase a workflow step belongs to."""

    LEAD = "LEAD"
    PROSPECT = "PROSPECT"
    PROSPECT_NON_INSURANCE = "PROSPECT_NON_INSURANCE"
    APPROVED = "APPROVED"
    EXECUTION = "EXECUTION"
    SUPPLEMENT = "SUPPLEMENT"
    SECOND_SUPPLEMENT = "SECOND_SUPPLEMENT"
    COMPLETION = "COMPLETION"


class WorkflowStatus(str, Enum):
    """Workflow progression status."""

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class AlertTier(str, Enum):
    """Escalation level of a due-date alert."""

    WARNING = "warning"
    URGENT = "urgent"
    OVERDUE = "overdue"


class NotificationPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class NotificationType(str, Enum):
    WORKFLOW_ALERT = "WORKFLOW_ALERT"
