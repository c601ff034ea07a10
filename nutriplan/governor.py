# -*- coding: utf-8 -*-
"""Request governor for outbound AI generation calls.

Every remote generation goes through ``RequestGovernor.execute``: calls are
spaced apart, transient failures are retried with exponential backoff,
rate-limit responses are honoured with a cooldown, and when the remote path is
exhausted (or the circuit is open) the caller's fallback producer supplies the
result instead. ``execute`` never raises for request failures.

Concurrent callers share one ``CallState`` per credential. Without
``serialize=True`` interleaved tasks race on it; pacing is best-effort.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

import httpx

from .config import settings

T = TypeVar("T")

GenerationRequest = Callable[[], Awaitable[T]]
FallbackProducer = Callable[[], T]

log = logging.getLogger(__name__)

_RATE_LIMIT_PATTERN = re.compile(r"\b429\b|rate[_ ]limit|too many requests", re.IGNORECASE)
_UNIT = r"(?:milliseconds?|ms|hours?|hrs?|h|minutes?|mins?|m|seconds?|secs?|s)(?![a-z])"
_RETRY_HINT = re.compile(
    rf"(?:try again|retry)(?:\s+(?:in|after))?\s+((?:\d+(?:\.\d+)?\s*(?:{_UNIT})?\s*)+)",
    re.IGNORECASE,
)
_DURATION_PART = re.compile(rf"(\d+(?:\.\d+)?)\s*({_UNIT})?", re.IGNORECASE)


def _unit_seconds(unit: str) -> float:
    unit = unit.lower()
    if unit.startswith("ms") or unit.startswith("milli"):
        return 0.001
    if unit.startswith("h"):
        return 3600.0
    if unit.startswith("m"):
        return 60.0
    return 1.0


@dataclass
class CallState:
    last_call_at: Optional[float] = None
    consecutive_failures: int = 0
    rate_limit_reset_at: Optional[float] = None
    rate_limit_events: int = 0


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    attempts: int = 1

    @property
    def degraded(self) -> bool:
        return False


@dataclass(frozen=True)
class Fallback(Generic[T]):
    value: T
    reason: str
    error: Optional[BaseException] = None

    @property
    def degraded(self) -> bool:
        return True


Outcome = Union[Success[T], Fallback[T]]


def parse_retry_delay(text: str) -> Optional[float]:
    """Parse a server-suggested delay such as ``try again in 1.5s`` into seconds.

    Compound durations (``2m30.5s``, ``1 min 30 s``), milliseconds and bare
    numbers (seconds) are accepted; parsing stops at the first token that is
    not part of the duration. Returns None when no hint is present.
    """
    match = _RETRY_HINT.search(text or "")
    if not match:
        return None
    total = 0.0
    found = False
    for value, unit in _DURATION_PART.findall(match.group(1)):
        found = True
        total += float(value) * _unit_seconds(unit)
    return total if found else None


def _error_details(exc: BaseException) -> tuple[Optional[int], str, Optional[str]]:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        return response.status_code, response.text or "", response.headers.get("retry-after")
    status = getattr(exc, "status_code", None)
    body = getattr(exc, "body", None) or ""
    retry_after = getattr(exc, "retry_after", None)
    return status if isinstance(status, int) else None, str(body), retry_after


def rate_limit_delay(exc: BaseException, default: float) -> Optional[float]:
    """Return the cooldown to honour for ``exc``, or None if it is not a rate limit.

    Parse and validation failures (``ValueError``) are local and never count
    as rate limits, whatever text they carry.
    """
    if isinstance(exc, ValueError):
        return None
    status, body, retry_after = _error_details(exc)
    text = f"{exc} {body}"
    if status != 429 and not _RATE_LIMIT_PATTERN.search(text):
        return None
    delay = parse_retry_delay(text)
    if delay is None and retry_after:
        try:
            delay = float(str(retry_after).strip())
        except ValueError:
            delay = None
    if delay is None or delay < 0:
        return default
    return delay


class RequestGovernor:
    """Pacing, retry, cooldown and fallback for one shared credential."""

    def __init__(
        self,
        state: CallState | None = None,
        *,
        min_interval_s: float = 3.0,
        failure_threshold: int = 2,
        circuit_reset_s: float = 60.0,
        default_rate_limit_delay_s: float = 5.0,
        max_retries: int = 2,
        backoff_base_s: float = 1.0,
        serialize: bool = False,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.state = state if state is not None else CallState()
        self.min_interval_s = min_interval_s
        self.failure_threshold = failure_threshold
        self.circuit_reset_s = circuit_reset_s
        self.default_rate_limit_delay_s = default_rate_limit_delay_s
        self.max_retries = max_retries
        self.backoff_base_s = backoff_base_s
        self._clock = clock
        self._sleep = sleep
        self._lock: asyncio.Lock | None = asyncio.Lock() if serialize else None
        self._reset_handle: asyncio.TimerHandle | None = None
        self._reset_deadline: Optional[float] = None

    async def execute(
        self,
        request: GenerationRequest[T],
        fallback: FallbackProducer[T],
        max_retries: int | None = None,
    ) -> T:
        outcome = await self.run(request, fallback, max_retries=max_retries)
        return outcome.value

    async def run(
        self,
        request: GenerationRequest[T],
        fallback: FallbackProducer[T],
        max_retries: int | None = None,
    ) -> Outcome[T]:
        retries = self.max_retries if max_retries is None else max(0, max_retries)
        if self._lock is None:
            return await self._run(request, fallback, retries)
        async with self._lock:
            return await self._run(request, fallback, retries)

    async def _run(
        self,
        request: GenerationRequest[T],
        fallback: FallbackProducer[T],
        retries: int,
    ) -> Outcome[T]:
        state = self.state

        if self._reset_deadline is not None and self._clock() >= self._reset_deadline:
            self._reset_circuit()
        if state.consecutive_failures >= self.failure_threshold:
            log.warning(
                "AI circuit open (%d consecutive failures); using fallback",
                state.consecutive_failures,
            )
            self._schedule_circuit_reset()
            return Fallback(fallback(), reason="circuit_open")

        now = self._clock()
        if state.rate_limit_reset_at is not None and now < state.rate_limit_reset_at:
            wait = state.rate_limit_reset_at - now
            log.info("Rate-limit cooldown: waiting %.2fs before AI call", wait)
            await self._sleep(wait)

        if state.last_call_at is not None:
            elapsed = self._clock() - state.last_call_at
            if elapsed < self.min_interval_s:
                wait = self.min_interval_s - elapsed
                log.debug("Pacing: waiting %.2fs before AI call", wait)
                await self._sleep(wait)

        last_error: BaseException | None = None
        for attempt in range(retries + 1):
            remaining = attempt < retries
            state.last_call_at = self._clock()
            try:
                result = await request()
            except Exception as exc:
                last_error = exc
                delay = rate_limit_delay(exc, self.default_rate_limit_delay_s)
                if delay is not None:
                    state.rate_limit_events += 1
                    state.rate_limit_reset_at = self._clock() + delay
                    log.warning(
                        "AI call rate limited (attempt %d/%d); cooling down %.2fs",
                        attempt + 1,
                        retries + 1,
                        delay,
                    )
                    if remaining:
                        await self._sleep(delay)
                    continue
                log.warning(
                    "AI call failed (attempt %d/%d): %s", attempt + 1, retries + 1, exc
                )
                if remaining:
                    await self._sleep(self.backoff_base_s * 2**attempt)
                continue
            state.consecutive_failures = 0
            return Success(result, attempts=attempt + 1)

        state.consecutive_failures += 1
        log.warning(
            "AI call exhausted %d attempts (%d/%d consecutive failures); using fallback",
            retries + 1,
            state.consecutive_failures,
            self.failure_threshold,
        )
        return Fallback(fallback(), reason="exhausted", error=last_error)

    def _schedule_circuit_reset(self) -> None:
        if self._reset_deadline is not None:
            return
        self._reset_deadline = self._clock() + self.circuit_reset_s
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._reset_handle = loop.call_later(self.circuit_reset_s, self._reset_circuit)

    def _reset_circuit(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
        self._reset_handle = None
        self._reset_deadline = None
        if self.state.consecutive_failures:
            log.info("AI circuit reset after cooldown")
        self.state.consecutive_failures = 0


def build_default_governor() -> RequestGovernor:
    return RequestGovernor(
        CallState(),
        min_interval_s=settings.ai_min_interval_s,
        failure_threshold=settings.ai_failure_threshold,
        circuit_reset_s=settings.ai_circuit_reset_s,
        default_rate_limit_delay_s=settings.ai_rate_limit_delay_s,
        max_retries=settings.ai_max_retries,
        serialize=settings.ai_serialize,
    )


default_governor = build_default_governor()
