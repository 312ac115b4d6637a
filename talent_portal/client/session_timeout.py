"""
Inactivity timeout for a client session.

SessionTimeout owns two timers: a warning that fires ``prompt_before``
seconds ahead of the timeout, and the timeout itself, which runs the
``on_timeout`` callback and then logs the user out. Every recorded
activity renews the cached session and re-arms both timers. ``cancel``
(or leaving the ``with`` block) stops them.
"""

import logging
import threading
import time
from functools import partial
from typing import Callable, List, Optional

from talent_portal.client.session_cache import DEFAULT_SESSION_TIMEOUT, SessionStore

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_BEFORE = 60 * 60  # seconds

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class SessionTimeout:
    """
    Args:
        sessions: the cached session being watched
        logout: called when the session times out (or on logout_now)
        timeout: inactivity window in seconds
        prompt_before: how long before the timeout ``on_prompt`` fires
        on_prompt / on_timeout: optional callbacks
        timer_factory: builds a startable, cancellable timer (threading.Timer by default)
    """

    def __init__(
        self,
        sessions: SessionStore,
        logout: Callable[[], None],
        timeout: float = DEFAULT_SESSION_TIMEOUT,
        prompt_before: float = DEFAULT_PROMPT_BEFORE,
        on_prompt: Optional[Callable[[], None]] = None,
        on_timeout: Optional[Callable[[], None]] = None,
        timer_factory: TimerFactory = threading.Timer,
        clock: Callable[[], float] = time.monotonic,
    ):
        if prompt_before >= timeout:
            raise ValueError("prompt_before must be shorter than timeout")
        self.sessions = sessions
        self.logout = logout
        self.timeout = timeout
        self.prompt_before = prompt_before
        self.on_prompt = on_prompt
        self.on_timeout = on_timeout
        self.timer_factory = timer_factory
        self.clock = clock

        self._lock = threading.Lock()
        self._timers: List[threading.Timer] = []
        # bumped whenever the timers are replaced; callbacks from older timers are ignored
        self._generation = 0
        self.last_activity = clock()

    # -------------------- timers --------------------

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        timer = self.timer_factory(delay, callback)
        timer.daemon = True
        timer.start()
        self._timers.append(timer)

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []
        self._generation += 1

    def _arm(self, remaining: float) -> None:
        self._cancel_timers()
        generation = self._generation
        if remaining > self.prompt_before:
            self._schedule(remaining - self.prompt_before, partial(self._fire_prompt, generation))
        self._schedule(remaining, partial(self._fire_timeout, generation))

    def _fire_prompt(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
        if self.on_prompt:
            self.on_prompt()

    def _fire_timeout(self, generation: int) -> None:
        with self._lock:
            # stale: re-armed or cancelled after this timer started
            if generation != self._generation:
                return
            self._cancel_timers()
        logger.info("Session timed out after inactivity")
        if self.on_timeout:
            self.on_timeout()
        self.logout()

    # -------------------- public API --------------------

    def start(self) -> bool:
        """
        Arm the timers for whatever is left of the cached session.
        Returns False (and arms nothing) when there is no live session.
        """
        remaining = min(self.sessions.remaining(), self.timeout)
        if remaining <= 0:
            return False
        with self._lock:
            self.last_activity = self.clock()
            self._arm(remaining)
        return True

    def record_activity(self) -> None:
        """User did something: renew the cached session and restart the full window."""
        with self._lock:
            self.last_activity = self.clock()
            if self.sessions.get_session() is None:
                self._cancel_timers()
                return
            self.sessions.refresh()
            self._arm(self.timeout)

    def extend(self) -> None:
        self.record_activity()

    def time_until_timeout(self) -> float:
        return max(0.0, self.timeout - (self.clock() - self.last_activity))

    def logout_now(self) -> None:
        self.cancel()
        self.logout()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_timers()

    def __enter__(self) -> "SessionTimeout":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()
