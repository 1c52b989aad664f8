"""
Slice Verification Reports
File: verification.py

Purpose: Report shape for check_slice(). Instead of stopping at the first
mismatch, the verifier records one CheckResult per check so the CLI (or an
audit log) can show exactly which property of a slice failed.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import TreeError


# info = passed, warn = not run (missing input), error = failed
CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """Outcome of one slice check (parse, root match, value, position)."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1, description="Name of the check, e.g. 'root_match'")
    ok: bool = Field(..., description="False only when the check ran and failed")
    severity: CheckSeverity = Field(..., description="info, warn (skipped) or error")
    message: str = Field(..., description="One-line explanation")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Digests, indices or positions behind the outcome",
    )

    @property
    def is_error(self) -> bool:
        return self.severity == "error" and not self.ok

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "ok",
        details: Optional[dict[str, Any]] = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message, details=details or {})

    @classmethod
    def skipped(cls, check_id: str, message: str) -> "CheckResult":
        """A check that had nothing to compare against; does not fail the report."""
        return cls(check_id=check_id, ok=True, severity="warn", message=message)

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message, details=details or {})


class VerificationResult(BaseModel):
    """
    Report for one slice checked against a trusted root.

    ``ok`` flips to False as soon as a failed check is added and never
    flips back.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(..., description="True if no check failed")
    checks: list[CheckResult] = Field(default_factory=list, description="Checks in the order they ran")
    computed_root: Optional[str] = Field(
        default=None,
        description="Root recomputed from the slice (hex); absent if the slice did not parse",
    )
    error: Optional[TreeError] = Field(
        default=None,
        description="Set when verification stopped on an exception",
    )

    @property
    def error_count(self) -> int:
        return len(self.get_failed_checks())

    def get_failed_checks(self) -> list[CheckResult]:
        return [c for c in self.checks if c.is_error]

    def get_error_messages(self) -> list[str]:
        return [c.message for c in self.get_failed_checks()]

    @classmethod
    def from_error(cls, error: TreeError) -> "VerificationResult":
        """A failed report with no checks run yet."""
        return cls(ok=False, error=error)

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if not check.ok:
            self.ok = False


__all__ = [
    "CheckSeverity",
    "CheckResult",
    "VerificationResult",
]
