"""Live trip tracking sessions.

One :class:`TripTracker` owns every tracking session of a screen. Each
session holds the latest :class:`TrackingState` for a trip id and a single
``asyncio`` task that ticks it on a fixed interval. Stopping, replacing or
closing always cancels that task.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pywassel._constants import STREAM_BUFFER_SIZE
from pywassel.config import WasselConfig
from pywassel.exceptions import TrackingSessionNotFoundError
from pywassel.models.geo import GeoPoint
from pywassel.models.tracking import TrackingState, TripStatus
from pywassel.tracking.location import LocationProvider
from pywassel.tracking.simulator import DriverMotionSimulator
from pywassel.tracking.transitions import check_transition

_logger = logging.getLogger(__name__)


def _clean_trip_id(trip_id: str | None) -> str | None:
    """Stripped trip id, or ``None`` for a missing or blank one."""
    if trip_id is None:
        return None
    return trip_id.strip() or None


class TrackingStream:
    """Async iterator over the states emitted for one trip.

    The stream ends when the session is stopped or replaced. ``latest``
    always holds the most recent state pushed to the stream, whether or
    not it has been consumed. At most *buffer_size* unconsumed states are
    kept; when a slow reader falls behind the oldest ones are dropped.

    Usage::

        stream = tracker.start_tracking("trip-1")
        async for state in stream:
            render(state)
    """

    def __init__(
        self,
        trip_id: str,
        detach: Callable[[TrackingStream], None],
        *,
        buffer_size: int = STREAM_BUFFER_SIZE,
    ) -> None:
        self.trip_id = trip_id
        self.latest: TrackingState | None = None
        self._queue: asyncio.Queue[TrackingState | None] = asyncio.Queue(maxsize=max(1, buffer_size))
        self._detach = detach
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of states waiting to be consumed."""
        return self._queue.qsize()

    def _offer(self, item: TrackingState | None) -> None:
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(item)

    def _push(self, state: TrackingState) -> None:
        if self._closed:
            return
        self.latest = state
        self._offer(state)

    def _end(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._offer(None)

    def __aiter__(self) -> TrackingStream:
        return self

    async def __anext__(self) -> TrackingState:
        state = await self._queue.get()
        if state is None:
            raise StopAsyncIteration
        return state

    def close(self) -> None:
        """Stop receiving states without stopping the session."""
        self._detach(self)
        self._end()


@dataclass(slots=True)
class _TrackingSession:
    trip_id: str
    state: TrackingState
    task: asyncio.Task[None] | None = None
    streams: list[TrackingStream] = field(default_factory=list)


class TripTracker:
    """Tracks trips by ticking their state on a fixed interval.

    Parameters
    ----------
    config : WasselConfig or None
        Tick interval, motion and ETA settings. Defaults to
        ``WasselConfig()``.
    location_provider : LocationProvider or None
        Source of the rider position. Without one the rider position is
        always unknown.
    rng : random.Random or None
        Random source for synthetic driver motion.
    on_update : callable or None
        Called with every emitted state. Exceptions raised by the callback
        are logged and ignored.

    Usage::

        async with TripTracker(config, location_provider=provider) as tracker:
            stream = tracker.start_tracking(trip_id)
            ...
            tracker.update_status(trip_id, TripStatus.ARRIVED)
    """

    def __init__(
        self,
        config: WasselConfig | None = None,
        *,
        location_provider: LocationProvider | None = None,
        rng: random.Random | None = None,
        on_update: Callable[[TrackingState], None] | None = None,
    ) -> None:
        self._config = config if config is not None else WasselConfig()
        self._location_provider = location_provider
        self._simulator = DriverMotionSimulator(self._config, rng=rng)
        self._on_update = on_update
        self._sessions: dict[str, _TrackingSession] = {}

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TripTracker:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        tasks = self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def close(self) -> list[asyncio.Task[None]]:
        """Stop every session. Returns the cancelled tick tasks."""
        tasks: list[asyncio.Task[None]] = []
        for trip_id in list(self._sessions):
            task = self._stop(trip_id)
            if task is not None:
                tasks.append(task)
        return tasks

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @property
    def active_trips(self) -> list[str]:
        return list(self._sessions)

    def start_tracking(self, trip_id: str | None) -> TrackingStream | None:
        """Start (or restart) tracking a trip.

        Must be called from a running event loop. A blank or ``None``
        *trip_id* starts nothing and returns ``None``. Starting a trip that
        is already tracked replaces its session.

        Returns
        -------
        TrackingStream or None
            Stream that first yields the initial state, then every update.
        """
        trip_id = _clean_trip_id(trip_id)
        if trip_id is None:
            return None
        loop = asyncio.get_running_loop()

        if self._stop(trip_id) is not None:
            _logger.debug("Replacing tracking session for trip %s", trip_id)

        state = self._simulator.initial_state(trip_id, self._rider_position())
        session = _TrackingSession(trip_id=trip_id, state=state)
        stream = self._open_stream(session)
        self._sessions[trip_id] = session
        self._emit(session, state)

        session.task = loop.create_task(self._run(session), name=f"pywassel-tracking-{trip_id}")
        _logger.debug(
            "Started tracking trip %s (interval=%.1fs demo=%s)",
            trip_id,
            self._config.tick_interval,
            self._config.demo_mode,
        )
        return stream

    def stop_tracking(self, trip_id: str | None) -> None:
        """Stop ticking *trip_id* and end its streams.

        Unknown, blank or ``None`` trip ids are ignored.
        """
        trip_id = _clean_trip_id(trip_id)
        if trip_id is None:
            return
        if self._stop(trip_id) is not None:
            _logger.debug("Stopped tracking trip %s", trip_id)

    def get_state(self, trip_id: str | None) -> TrackingState | None:
        session = self._sessions.get(_clean_trip_id(trip_id) or "")
        return session.state if session is not None else None

    def watch(self, trip_id: str) -> TrackingStream:
        """Open another stream on a live session, seeded with its current state."""
        session = self._require_session(trip_id)
        stream = self._open_stream(session)
        stream._push(session.state)
        return stream

    def update_status(self, trip_id: str, status: TripStatus | str) -> TrackingState:
        """Set the trip status.

        Raises
        ------
        TrackingSessionNotFoundError
            If no session is live for *trip_id*.
        InvalidStatusTransitionError
            If transitions are enforced and *status* cannot follow the
            current status.
        ValueError
            If *status* is not a known status value.
        """
        session = self._require_session(trip_id)
        requested = TripStatus(status)
        current = session.state.status
        check_transition(
            session.trip_id,
            current,
            requested,
            strict=self._config.strict_status_transitions,
        )
        if requested == current:
            return session.state

        _logger.debug("Trip %s status %s -> %s", session.trip_id, current.value, requested.value)
        state = session.state.with_changes(status=requested)
        self._emit(session, state)
        return state

    def report_driver_position(self, trip_id: str, position: GeoPoint | dict[str, Any]) -> TrackingState:
        """Apply a driver position pushed by an external feed."""
        session = self._require_session(trip_id)
        point = position if isinstance(position, GeoPoint) else GeoPoint.model_validate(position)
        state = self._simulator.relocate(session.state, point)
        self._emit(session, state)
        return state

    def tick(self, trip_id: str) -> TrackingState:
        """Apply one update immediately, outside the regular interval."""
        return self._tick(self._require_session(trip_id))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_session(self, trip_id: str | None) -> _TrackingSession:
        session = self._sessions.get(_clean_trip_id(trip_id) or "")
        if session is None:
            raise TrackingSessionNotFoundError(f"no tracking session for trip {trip_id!r}", trip_id=trip_id or "")
        return session

    def _open_stream(self, session: _TrackingSession) -> TrackingStream:
        def _detach(stream: TrackingStream) -> None:
            if stream in session.streams:
                session.streams.remove(stream)

        stream = TrackingStream(session.trip_id, _detach)
        session.streams.append(stream)
        return stream

    def _stop(self, trip_id: str) -> asyncio.Task[None] | None:
        session = self._sessions.pop(trip_id, None)
        if session is None:
            return None
        task = session.task
        session.task = None
        if task is not None and not task.done():
            task.cancel()
        for stream in session.streams:
            stream._end()
        session.streams.clear()
        return task

    def _rider_position(self) -> GeoPoint | None:
        if self._location_provider is None:
            return None
        try:
            return self._location_provider.current_position()
        except Exception:
            _logger.debug("Location provider failed; rider position unknown", exc_info=True)
            return None

    async def _run(self, session: _TrackingSession) -> None:
        interval = self._config.tick_interval
        while True:
            await asyncio.sleep(interval)
            if self._sessions.get(session.trip_id) is not session:
                return
            self._tick(session)

    def _tick(self, session: _TrackingSession) -> TrackingState:
        rider = self._rider_position()
        if self._config.demo_mode:
            state = self._simulator.advance(session.state, rider)
        else:
            state = self._simulator.refresh(session.state, rider)
        self._emit(session, state)
        return state

    def _emit(self, session: _TrackingSession, state: TrackingState) -> None:
        session.state = state
        for stream in list(session.streams):
            stream._push(state)
        if self._on_update is not None:
            try:
                self._on_update(state)
            except Exception:
                _logger.debug("on_update callback failed", exc_info=True)
