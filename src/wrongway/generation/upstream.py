"""
Upstream chat-completions call with timeout and linear-backoff retries.

The retry loop is an explicit state machine:

    ATTEMPTING --2xx + JSON body--------------------------> SUCCEEDED
    ATTEMPTING --429 / 5xx / timeout / network, budget left--> BACKOFF_WAIT
    ATTEMPTING --anything else, or budget spent-------------> FAILED
    BACKOFF_WAIT --sleep(base * attempt)--------------------> ATTEMPTING

`next_state` and `backoff_delay` are pure so the policy can be tested
without a network; `UpstreamInvoker` only performs the calls and sleeps.

Example:
    invoker = UpstreamInvoker.from_settings(settings)
    body = invoker.invoke(prompt)
    text = completion_text(body)
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import requests

from wrongway.common.config import Settings
from wrongway.errors import UpstreamError
from wrongway.generation.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class AttemptState(str, Enum):
    ATTEMPTING = "attempting"
    BACKOFF_WAIT = "backoff_wait"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AttemptResult:
    """
    Outcome of one HTTP attempt.

    Attributes:
        status: HTTP status, or None when no response arrived
        body: Parsed JSON on success, response text otherwise
        parsed: True if body is decoded JSON
        timed_out: True if the attempt hit the timeout
        error: Diagnostic for timeouts / network errors / bad bodies
    """

    status: Optional[int]
    body: Any = None
    parsed: bool = False
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300 and self.parsed

    @property
    def detail(self) -> str:
        if self.error and not self.body:
            return self.error
        if isinstance(self.body, str):
            return self.body
        return self.error or ""


def is_retryable(result: AttemptResult) -> bool:
    """429, any 5xx, timeouts and dropped connections are worth another try."""
    if result.status is None:
        return True
    return result.status == 429 or 500 <= result.status <= 599


def next_state(result: AttemptResult, attempt: int, retries: int) -> AttemptState:
    """
    Transition out of ATTEMPTING.

    Args:
        result: Outcome of the attempt just made
        attempt: 1-based number of that attempt
        retries: Retry budget; at most retries + 1 attempts are made
    """
    if result.ok:
        return AttemptState.SUCCEEDED
    if is_retryable(result) and attempt <= retries:
        return AttemptState.BACKOFF_WAIT
    return AttemptState.FAILED


def backoff_delay(attempt: int, base: float) -> float:
    """Linear backoff: wait base * attempt before attempt + 1."""
    return base * attempt


def completion_text(body: Any) -> str:
    """Pull choices[0].message.content out of a chat-completions body ("" if absent)."""
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""



class UpstreamInvoker:
    """
    Sequential chat-completions caller.

    Holds only immutable settings. Every invoke() opens its own
    requests.Session from session_factory and closes it on return, so one
    invoker can serve concurrent requests.

    timeout_s is a hard per-attempt limit: requests enforces it on connect
    and on each socket read, and the body is streamed against a wall-clock
    deadline so a backend that trickles bytes still times out.

    Attributes:
        retries: Extra attempts after the first
        timeout_s: Per-attempt deadline in seconds
        backoff_s: Linear backoff base
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        timeout_s: float = 20.0,
        retries: int = 2,
        backoff_s: float = 0.5,
        temperature: float = 0.7,
        max_tokens: int = 700,
        session_factory: Callable[[], requests.Session] = requests.Session,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if retries < 0:
            raise ValueError(f"retries={retries} must be >= 0")
        self.api_key = api_key
        self.model = model
        self.url = base_url.rstrip("/") + "/chat/completions"
        self.timeout_s = timeout_s
        self.retries = retries
        self.backoff_s = backoff_s
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._session_factory = session_factory
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "UpstreamInvoker":
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout_s=settings.timeout_s,
            retries=settings.retries,
            backoff_s=settings.backoff_s,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            **kwargs,
        )

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }

    def _read_body(self, resp, deadline: float) -> str:
        chunks = []
        for chunk in resp.iter_content(chunk_size=8192):
            chunks.append(chunk)
            if self._clock() > deadline:
                raise requests.Timeout(f"body still streaming after {self.timeout_s:.1f}s")
        return b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")

    def _attempt(self, session: requests.Session, prompt: str) -> AttemptResult:
        """Single HTTP call without retries/backoff."""
        deadline = self._clock() + self.timeout_s
        try:
            resp = session.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=self._payload(prompt),
                timeout=self.timeout_s,
                stream=True,
            )
            with resp:
                text = self._read_body(resp, deadline)
        except requests.Timeout as e:
            return AttemptResult(
                status=None,
                timed_out=True,
                error=f"Upstream timed out after {self.timeout_s:.1f}s: {e}",
            )
        except requests.RequestException as e:
            return AttemptResult(status=None, error=f"Upstream network error: {e}")

        if 200 <= resp.status_code < 300:
            try:
                return AttemptResult(status=resp.status_code, body=json.loads(text), parsed=True)
            except ValueError:
                return AttemptResult(
                    status=resp.status_code,
                    body=text,
                    error="Upstream returned a non-JSON body",
                )

        return AttemptResult(status=resp.status_code, body=text)

    def invoke(self, prompt: str) -> Dict[str, Any]:
        """
        Run the retry state machine until SUCCEEDED or FAILED.

        Returns:
            Parsed chat-completions response body

        Raises:
            UpstreamError: Carrying the last status/body or timeout diagnostic
        """
        with self._session_factory() as session:
            return self._run(session, prompt)

    def _run(self, session: requests.Session, prompt: str) -> Dict[str, Any]:
        attempt = 1
        state = AttemptState.ATTEMPTING

        while True:
            logger.debug(f"Upstream attempt {attempt}/{self.retries + 1} -> {self.url}")
            result = self._attempt(session, prompt)
            state = next_state(result, attempt, self.retries)

            if state is AttemptState.SUCCEEDED:
                logger.debug(f"Upstream succeeded on attempt {attempt}")
                return result.body

            if state is AttemptState.FAILED:
                logger.error(
                    f"Upstream failed after {attempt} attempt(s): "
                    f"status={result.status} detail={result.detail[:500]!r}"
                )
                raise UpstreamError(
                    "Upstream timeout" if result.timed_out else "Upstream error",
                    status=result.status,
                    detail=result.detail,
                    timed_out=result.timed_out,
                    attempts=attempt,
                )

            delay = backoff_delay(attempt, self.backoff_s)
            logger.warning(
                f"Upstream attempt {attempt} got "
                f"{'timeout' if result.timed_out else result.status or 'network error'}, "
                f"retrying in {delay:.2f}s"
            )
            self._sleep(delay)
            attempt += 1
