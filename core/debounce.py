# core/debounce.py
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Coalesce rapid triggers into one call of `fn`.

    Every trigger cancels the pending timer and starts a new one, so `fn`
    runs once, `wait_seconds` after the last trigger, with the last
    trigger's arguments.
    """

    def __init__(self, wait_seconds: float, fn: Callable[..., Any]):
        self.wait_seconds = wait_seconds
        self.fn = fn
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._args: Tuple[Any, ...] = ()
        self._done = threading.Event()
        self._done.set()
        self.last_error: Optional[BaseException] = None

    @property
    def pending(self) -> bool:
        return not self._done.is_set()

    def trigger(self, *args: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._args = args
            self._done.clear()
            self._timer = threading.Timer(self.wait_seconds, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def _claim(self, generation: int) -> Optional[Tuple[Any, ...]]:
        # exactly one of the timer thread or flush() gets to run a generation
        with self._lock:
            if generation != self._generation or self._timer is None:
                return None
            self._timer.cancel()
            self._timer = None
            return self._args

    def _fire(self, generation: int) -> None:
        args = self._claim(generation)
        if args is not None:
            self._run(args)

    def _run(self, args: Tuple[Any, ...]) -> None:
        try:
            self.last_error = None
            self.fn(*args)
        except Exception as e:
            # handed back to the caller by wait()/flush()
            logger.error("Debounced call failed: %s", e, exc_info=True)
            self.last_error = e
        finally:
            with self._lock:
                if self._timer is None:
                    self._done.set()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._done.set()

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        with self._lock:
            generation = self._generation
        args = self._claim(generation)
        if args is None:
            self.wait()
            return
        self._run(args)
        self._raise_last()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending call (if any) has run. Re-raises its error."""
        finished = self._done.wait(timeout)
        self._raise_last()
        return finished

    def _raise_last(self) -> None:
        if self.last_error is not None:
            err, self.last_error = self.last_error, None
            raise err
