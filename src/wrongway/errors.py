"""
Error taxonomy for the joke pipeline.

    RequestError   - caller sent structurally invalid params (never retried)
    UpstreamError  - backend unreachable / rate-limited / faulting / timing out,
                     raised only after the retry budget is spent
    ContractError  - backend answered but the payload breaks the JSON contract
"""

from typing import Optional


class JokeServiceError(Exception):
    """Base class for every failure the pipeline reports to callers."""


class RequestError(JokeServiceError):
    pass


class UpstreamError(JokeServiceError):
    """
    Terminal failure of the upstream call.

    Attributes:
        status: Last HTTP status seen (None on timeout / network error)
        detail: Response body or timeout/network diagnostic
        timed_out: True if the last attempt hit the timeout
        attempts: Number of attempts made
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        detail: str = "",
        timed_out: bool = False,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.status = status
        self.detail = detail
        self.timed_out = timed_out
        self.attempts = attempts


class ContractError(JokeServiceError):
    """Model output could not be parsed or violates the schema; `raw` keeps the original text."""

    def __init__(self, message: str, *, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw
