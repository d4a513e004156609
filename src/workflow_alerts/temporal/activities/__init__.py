"""
Temporal Activities - Fine-grained, idempotent operations.

Activities should be:
1. Idempotent - Safe to retry
2. Fine-grained - Do one thing well
3. Side-effect aware - External calls go here, not in workflows
"""

from src.workflow_alerts.temporal.activities.alerts import (
    cleanup_alert_history,
    cleanup_orphaned_workflows,
    run_alert_sweep,
)

__all__ = [
    "cleanup_alert_history",
    "cleanup_orphaned_workflows",
    "run_alert_sweep",
]
