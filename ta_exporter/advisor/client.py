"""boto3-based client for the Trusted Advisor part of the AWS Support API.

All methods return typed models or raise AdvisorError.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from ta_exporter.advisor.models import Check, CheckResult
from ta_exporter.config import LANGUAGE, SUPPORT_REGION

logger = logging.getLogger(__name__)


class AdvisorError(Exception):
    """Raised when a Trusted Advisor call fails or returns garbage."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


def make_support_client(timeout: float = 30.0) -> Any:
    """Create the boto3 ``support`` client pinned to the Trusted Advisor region.

    botocore's own retries are disabled; retrying is owned by the refresher.
    """
    config = Config(
        region_name=SUPPORT_REGION,
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"max_attempts": 1, "mode": "standard"},
    )
    return boto3.client("support", config=config)


class AdvisorClient:
    """Thin wrapper over the boto3 support client.

    boto3 clients are thread-safe, so one instance is shared by every
    refresh worker.
    """

    def __init__(self, support: Any | None = None, timeout: float = 30.0) -> None:
        self._support = support if support is not None else make_support_client(timeout)

    def list_checks(self) -> list[Check]:
        """DescribeTrustedAdvisorChecks"""
        op = "DescribeTrustedAdvisorChecks"
        try:
            resp = self._support.describe_trusted_advisor_checks(language=LANGUAGE)
            return [Check(**c) for c in resp["checks"]]
        except (ClientError, BotoCoreError) as e:
            raise AdvisorError(op, str(e)) from e
        except (KeyError, TypeError, ValidationError) as e:
            raise AdvisorError(op, f"malformed response: {e}") from e

    def get_check_result(self, check_id: str) -> CheckResult:
        """DescribeTrustedAdvisorCheckResult"""
        op = "DescribeTrustedAdvisorCheckResult"
        try:
            resp = self._support.describe_trusted_advisor_check_result(
                checkId=check_id, language=LANGUAGE,
            )
            return CheckResult.from_api(check_id, resp["result"])
        except (ClientError, BotoCoreError) as e:
            raise AdvisorError(op, str(e)) from e
        except (KeyError, TypeError, ValidationError) as e:
            raise AdvisorError(op, f"malformed response for {check_id}: {e}") from e
