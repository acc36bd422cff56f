"""Background watchdog that re-evaluates the restriction decision."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from audit.logger import record_event
from device_integrity.models import PolicyDecision

_logger = logging.getLogger(__name__)

DecisionHandler = Callable[[PolicyDecision], None]
Scheduler = Callable[[Callable[[], None]], None]
EvaluateFn = Callable[[], PolicyDecision]


class RestrictionWatchdog:
    """Periodically evaluate the device and report decision changes.

    Device state can change while the app runs (root granted, Magisk
    installed), so a single check at start-up is not enough. Nothing runs in
    the background until :meth:`start` is called, and ``audit=True`` persists
    each change as a signed record.
    """

    def __init__(
        self,
        evaluate_fn: EvaluateFn,
        *,
        interval: float = 30.0,
        scheduler: Scheduler | None = None,
        change_handler: DecisionHandler | None = None,
        restrict_handler: Optional[DecisionHandler] = None,
        audit: bool = False,
    ) -> None:
        self.evaluate_fn = evaluate_fn
        self.interval = interval
        self.scheduler = scheduler or (lambda fn: fn())
        self.change_handler = change_handler
        self.restrict_handler = restrict_handler
        self.audit = audit
        self._stop_event = threading.Event()
        self._timer: threading.Timer | None = None
        self._last: PolicyDecision | None = None
        self._lock = threading.RLock()

    @property
    def last_decision(self) -> PolicyDecision | None:
        return self._last

    def start(self) -> None:
        """Start the watchdog loop."""

        self.stop()
        self._stop_event.clear()
        self._evaluate(schedule=True)

    def stop(self) -> None:
        """Stop the watchdog loop."""

        self._stop_event.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def run_once(self) -> PolicyDecision:
        """Evaluate immediately and return the decision."""

        return self._check()

    def _schedule_next(self) -> None:
        if self._stop_event.is_set():
            return
        timer = threading.Timer(self.interval, self._evaluate)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _evaluate(self, *, schedule: bool = True) -> None:
        if self._stop_event.is_set():
            return
        self._check()
        if schedule:
            self._schedule_next()

    def _check(self) -> PolicyDecision:
        # The timer thread and run_once() share _last.
        with self._lock:
            decision = self.evaluate_fn()
            previous = self._last
            if decision != previous:
                self._last = decision
                # The first clean evaluation is the baseline, not a change.
                if previous is not None or decision.restrict:
                    self._notify(decision)
            return decision

    def _notify(self, decision: PolicyDecision) -> None:
        def _dispatch() -> None:
            if decision.restrict:
                self._record("integrity.watchdog.restrict", {"reason": decision.reason})
            else:
                self._record("integrity.watchdog.clear", {})
            if self.change_handler:
                self.change_handler(decision)
            if decision.restrict and self.restrict_handler:
                self.restrict_handler(decision)

        self.scheduler(_dispatch)

    def _record(self, event: str, details: dict) -> None:
        if not self.audit:
            return
        try:
            record_event(event, details=details)
        except (OSError, ValueError) as exc:
            _logger.warning("Could not write audit record %s: %s", event, exc)


__all__ = ["RestrictionWatchdog"]
