# Entrius 2025
from typing import Optional


class DependabotApproveError(Exception):
    """Base class for errors raised by dependabot-approve."""


class ApiError(DependabotApproveError):
    """A GitHub API call failed (transport, auth, rate limit, not found).

    Args:
        operation (str): Identity of the failing call, e.g. ``"GET /repos/o/r/pulls"``
        message (str): Human readable cause
        status (Optional[int]): HTTP status, or None for transport errors and timeouts
    """

    def __init__(self, operation: str, message: str, status: Optional[int] = None):
        self.operation = operation
        self.message = message
        self.status = status
        super().__init__(str(self))

    def __str__(self) -> str:
        status = f" (HTTP {self.status})" if self.status is not None else ""
        return f"{self.operation} failed{status}: {self.message}"


class SelectionError(DependabotApproveError):
    """Operator selection input was empty, malformed, or out of range."""


class ApprovalFailure(DependabotApproveError):
    """A single approval submission was rejected. Never escapes the executor."""

    def __init__(self, number: int, detail: str):
        self.number = number
        self.detail = detail
        super().__init__(f"PR #{number}: {detail}")
