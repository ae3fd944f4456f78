"""Trusted Advisor API access — boto3 client wrapper and models."""

from .client import AdvisorClient, AdvisorError
from .models import Check, CheckResult, CheckStatus
