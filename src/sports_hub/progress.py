from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from typing import Any

from sports_hub.core.clock import Clock, SystemClock
from sports_hub.db.enums import ApiResultStatusEnum, SessionStateEnum

logger = logging.getLogger(__name__)

DEFAULT_TTL_S = 300.0
DEFAULT_ESTIMATE_S = 120.0


@dataclass
class ProviderResult:
    name: str
    status: ApiResultStatusEnum
    duration_ms: int | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "status": self.status.value}
        if self.duration_ms is not None:
            out["duration"] = self.duration_ms
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class FetchSession:
    session_id: str
    total_units: int
    start_time: float
    completed_units: int = 0
    current_task: str = "Initializing..."
    state: SessionStateEnum = SessionStateEnum.INITIALIZING
    errors: list[str] = field(default_factory=list)
    provider_results: list[ProviderResult] = field(default_factory=list)


@dataclass(frozen=True)
class ProgressSnapshot:
    session_id: str
    state: SessionStateEnum
    total: int
    completed: int
    percentage: int
    current_task: str
    elapsed_s: float
    estimated_remaining_s: float
    api_results: list[dict[str, Any]]
    errors: list[str]

    def as_dict(self) -> dict[str, Any]:
        """Wire shape of the progress endpoint; times in milliseconds."""
        return {
            "total": self.total,
            "completed": self.completed,
            "percentage": self.percentage,
            "current_task": self.current_task,
            "state": self.state.value,
            "elapsed_time": int(self.elapsed_s * 1000),
            "estimated_remaining": int(self.estimated_remaining_s * 1000),
            "api_results": self.api_results,
            "errors": self.errors,
        }


class ProgressTracker:
    """
    Session-keyed progress state for long fetches.

    initializing -> scanning -> completed | expired

    Each session is removed exactly once, `ttl_s` after creation, whether or
    not its fetch finished. Removal is scheduled on the running event loop when
    there is one and is also enforced lazily on every access, so a late poll
    always gets not-found.
    """

    def __init__(
        self,
        *,
        ttl_s: float = DEFAULT_TTL_S,
        default_estimate_s: float = DEFAULT_ESTIMATE_S,
        clock: Clock | None = None,
    ) -> None:
        self._ttl_s = ttl_s
        self._default_estimate_s = default_estimate_s
        self._clock = clock or SystemClock()
        self._sessions: dict[str, FetchSession] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, total_units: int) -> str:
        session_id = f"session_{int(self._clock.now().timestamp() * 1000)}_{secrets.token_hex(5)}"
        self._sessions[session_id] = FetchSession(
            session_id=session_id,
            total_units=max(0, total_units),
            start_time=self._clock.monotonic(),
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timers[session_id] = loop.call_later(self._ttl_s, self._expire, session_id)
        return session_id

    def _expire(self, session_id: str) -> None:
        timer = self._timers.pop(session_id, None)
        if timer is not None:
            timer.cancel()
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.state = SessionStateEnum.EXPIRED
            logger.debug("Progress session %s expired", session_id)

    def _live(self, session_id: str) -> FetchSession | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._clock.monotonic() - session.start_time >= self._ttl_s:
            self._expire(session_id)
            return None
        return session

    def update(
        self,
        session_id: str,
        *,
        completed_delta: int | None = None,
        current_task: str | None = None,
        error: str | None = None,
        provider_result: ProviderResult | None = None,
    ) -> None:
        session = self._live(session_id)
        if session is None:
            return

        if session.state is SessionStateEnum.INITIALIZING:
            session.state = SessionStateEnum.SCANNING

        if completed_delta:
            session.completed_units = min(
                session.total_units, max(0, session.completed_units + completed_delta)
            )
        if current_task:
            session.current_task = current_task
        if error:
            session.errors.append(error)
        if provider_result is not None:
            for i, existing in enumerate(session.provider_results):
                if existing.name == provider_result.name:
                    session.provider_results[i] = provider_result
                    break
            else:
                session.provider_results.append(provider_result)

    def complete(self, session_id: str, *, current_task: str = "Completed") -> None:
        session = self._live(session_id)
        if session is None:
            return
        session.state = SessionStateEnum.COMPLETED
        session.current_task = current_task

    def get(self, session_id: str) -> ProgressSnapshot | None:
        session = self._live(session_id)
        if session is None:
            return None

        elapsed = max(0.0, self._clock.monotonic() - session.start_time)
        total, completed = session.total_units, session.completed_units

        if total > 0:
            percentage = round(completed / total * 100)
        else:
            percentage = 100 if session.state is SessionStateEnum.COMPLETED else 0

        if completed > 0:
            remaining = max(0.0, (elapsed / completed) * total - elapsed)
        else:
            remaining = self._default_estimate_s

        return ProgressSnapshot(
            session_id=session.session_id,
            state=session.state,
            total=total,
            completed=completed,
            percentage=percentage,
            current_task=session.current_task,
            elapsed_s=elapsed,
            estimated_remaining_s=remaining,
            api_results=[r.as_dict() for r in session.provider_results],
            errors=list(session.errors),
        )
