"""Pydantic models for Trusted Advisor checks and their results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CheckStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    NOT_AVAILABLE = "not_available"


class Check(BaseModel):
    """One Trusted Advisor check, as listed by DescribeTrustedAdvisorChecks."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    category: str


class CheckResult(BaseModel):
    """Latest evaluation of a check: status plus flagged-resource count."""

    model_config = ConfigDict(frozen=True)

    check_id: str
    status: CheckStatus
    flagged_count: int = Field(default=0, ge=0)

    @classmethod
    def from_api(cls, check_id: str, result: dict[str, Any]) -> CheckResult:
        """Build from the ``result`` member of DescribeTrustedAdvisorCheckResult."""
        flagged = result.get("flaggedResources") or []
        return cls(
            check_id=result.get("checkId") or check_id,
            status=result["status"],
            flagged_count=len(flagged),
        )
