"""Alert routing tables - who gets alerted and what they are told.

The tables ship as ``alert_routing.json`` next to this module and can be
replaced per deployment with ``ALERT_ROUTING_PATH``. They are validated once
on first use and cached for the life of the process.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from src.workflow_alerts.core.config import get_settings
from src.workflow_alerts.core.logging import get_logger
from src.workflow_alerts.models.enums import UserRole

logger = get_logger(__name__)

DEFAULT_ROUTING_PATH = Path(__file__).with_name("alert_routing.json")


class AlertRoutingConfig(BaseModel):
    """Lookup tables used by recipient resolution and notification text."""

    named_recipients: dict[str, list[str]] = Field(default_factory=dict)
    role_groups: dict[str, list[UserRole]] = Field(default_factory=dict)
    management_roles: list[UserRole] = Field(
        default_factory=lambda: [UserRole.ADMIN, UserRole.MANAGER]
    )
    completion_roles: list[UserRole] = Field(
        default_factory=lambda: [UserRole.ADMIN, UserRole.MANAGER]
    )
    default_guidance: str = "Complete this task to proceed with the project"
    step_guidance: dict[str, str] = Field(default_factory=dict)
    clean_task_names: dict[str, str] = Field(default_factory=dict)
    clean_name_prefixes: list[str] = Field(default_factory=list)

    @field_validator("named_recipients")
    @classmethod
    def validate_named_recipients(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        for token, names in v.items():
            for name in names:
                if len(name.split()) != 2:
                    raise ValueError(
                        f"Named recipient '{name}' for {token} must be 'First Last'"
                    )
        return v

    @field_validator("management_roles", "completion_roles")
    @classmethod
    def validate_not_empty(cls, v: list[UserRole]) -> list[UserRole]:
        if not v:
            raise ValueError("Role lists must not be empty")
        return v

    def names_for(self, responsible: str | None) -> list[tuple[str, str]]:
        """(first, last) pairs designated for a responsible-role token."""
        if not responsible:
            return []
        pairs = []
        for name in self.named_recipients.get(responsible, []):
            first, last = name.split()
            pairs.append((first, last))
        return pairs

    def roles_for(self, responsible: str | None) -> list[UserRole]:
        """Acceptable user roles for a responsible-role token.

        Tokens without a mapping fall back to the user role of the same name,
        if there is one.
        """
        if not responsible:
            return []
        if responsible in self.role_groups:
            return list(self.role_groups[responsible])
        try:
            return [UserRole(responsible)]
        except ValueError:
            return []

    def guidance_for(self, step_name: str) -> str:
        return self.step_guidance.get(step_name, self.default_guidance)

    def clean_task_name(self, step_name: str) -> str:
        """Short display name for a step, e.g. 'Write Estimate' -> 'Create estimate'."""
        if step_name in self.clean_task_names:
            return self.clean_task_names[step_name]
        first, _, rest = step_name.partition(" ")
        if rest and first in self.clean_name_prefixes:
            return rest.strip().lower()
        return step_name.lower()


def load_alert_routing(path: str | Path | None = None) -> AlertRoutingConfig:
    """Load and validate routing tables from a JSON file."""
    source = Path(path) if path else DEFAULT_ROUTING_PATH
    config = AlertRoutingConfig.model_validate_json(source.read_text(encoding="utf-8"))
    logger.info(
        "Alert routing loaded",
        path=str(source),
        named_tokens=len(config.named_recipients),
        role_groups=len(config.role_groups),
        guidance_entries=len(config.step_guidance),
    )
    return config


@lru_cache
def get_alert_routing() -> AlertRoutingConfig:
    return load_alert_routing(get_settings().alert_routing_path)
