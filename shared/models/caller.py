"""Impersonated caller identity used for note mutations."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CallerRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class CallerContext(BaseModel):
    """
    Short-lived identity built fresh for every tool invocation.

    Never persisted and never reused across invocations. The role defaults
    to the least privileged one; tools pass the configured impersonation role.

    Attributes:
        account_id (str): Numeric account id as a string.
        role (CallerRole): Role asserted towards the note service.
        issued_at (datetime): Creation time (UTC).
    """

    model_config = ConfigDict(frozen=True)

    account_id: str
    role: CallerRole = CallerRole.USER
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
