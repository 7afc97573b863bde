"""
Background monitor driving file alteration observers.

A FileAlterationMonitor owns one loop thread that runs every registered
observer's scan in turn and then waits for the configured interval. The wait
is interruptible, so stop() returns as soon as the current scan finishes.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from alteration_monitor.config import get_config
from alteration_monitor.models import ConfigurationError, InitializationError, MonitorStateError, ShutdownError
from alteration_monitor.monitoring.file_observer import FileAlterationObserver

logger = logging.getLogger(__name__)

ThreadFactory = Callable[[Callable[[], None]], threading.Thread]


class FileAlterationMonitor:
    """
    Runs observers periodically on a background thread.

    Observers may be added or removed while the monitor is running; the
    next loop iteration picks up the change.
    """

    def __init__(
        self,
        interval: float | None = None,
        observers: Iterable[FileAlterationObserver] | None = None,
        thread_factory: ThreadFactory | None = None,
    ):
        """
        Initialize the monitor.

        Args:
            interval: Seconds to wait between scans (configured default if None)
            observers: Observers to register immediately
            thread_factory: Builds the loop thread from its target callable

        Raises:
            ConfigurationError: If the interval is negative
        """
        if interval is None:
            interval = get_config().monitor_interval_seconds
        if interval < 0:
            raise ConfigurationError(
                "Monitor interval must not be negative",
                config_key="interval",
                expected_type="float >= 0",
                actual_value=interval,
            )

        self._interval = float(interval)
        self._observers: tuple[FileAlterationObserver, ...] = ()
        self._observers_lock = threading.Lock()
        self._lifecycle_lock = threading.RLock()
        self._thread_factory = thread_factory
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._running = False
        self._stopping = False

        # Statistics tracking
        self._scan_count = 0
        self._last_scan_at: float | None = None

        for observer in observers or ():
            self.add_observer(observer)

    @property
    def interval(self) -> float:
        """Seconds between the end of one scan loop and the start of the next."""
        return self._interval

    @property
    def observers(self) -> tuple[FileAlterationObserver, ...]:
        """Snapshot of the registered observers in registration order."""
        return self._observers

    @property
    def is_running(self) -> bool:
        return self._running

    def add_observer(self, observer: FileAlterationObserver | None) -> None:
        """Register an observer; None is ignored."""
        if observer is None:
            return
        with self._observers_lock:
            self._observers = self._observers + (observer,)

    def remove_observer(self, observer: FileAlterationObserver | None) -> None:
        """Remove every registration of an observer; unknown observers are ignored."""
        if observer is None:
            return
        with self._observers_lock:
            self._observers = tuple(existing for existing in self._observers if existing is not observer)

    def set_thread_factory(self, thread_factory: ThreadFactory | None) -> None:
        """Set the factory used to build the loop thread on the next start()."""
        with self._lifecycle_lock:
            self._thread_factory = thread_factory

    def start(self) -> None:
        """
        Initialize every observer and start the loop thread.

        Raises:
            MonitorStateError: If the monitor is running or still stopping
            InitializationError: If an observer fails to initialize (no
                thread is started) or the loop thread cannot be started; the
                monitor stays stopped in both cases
        """
        with self._lifecycle_lock:
            if self._running:
                raise MonitorStateError("Monitor is already running", operation="start")
            if self._stopping:
                raise MonitorStateError("Monitor is still stopping", operation="start")

            for observer in self._observers:
                try:
                    observer.initialize()
                except Exception as e:
                    logger.error("Failed to initialize %s: %s", observer, e)
                    raise InitializationError(
                        f"Failed to initialize observer: {e}",
                        component=str(observer),
                        initialization_stage="observer_initialize",
                        underlying_error=e,
                    ) from e

            stop_event = threading.Event()
            self._stop_event = stop_event
            try:
                thread = self._create_thread()
                thread.start()
            except Exception as e:
                stop_event.set()
                logger.error("Failed to start monitor thread: %s", e)
                raise InitializationError(
                    f"Failed to start monitor thread: {e}",
                    component=str(self),
                    initialization_stage="thread_start",
                    underlying_error=e,
                ) from e

            self._thread = thread
            self._running = True
            logger.info("Monitor started with %d observers (interval: %ss)", len(self._observers), self._interval)

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop the loop thread and destroy every observer.

        A scan in progress runs to completion before the thread exits. The
        lifecycle lock is not held while waiting for the loop thread, so a
        listener may call stop() from a scan while another thread is stopping.

        Args:
            timeout: Seconds to wait for the loop thread; None uses the
                configured stop timeout, and 0 or an unset timeout waits
                indefinitely

        Raises:
            MonitorStateError: If the monitor is not running
            ShutdownError: If an observer fails to destroy; all observers are
                still attempted
        """
        with self._lifecycle_lock:
            if not self._running:
                raise MonitorStateError("Monitor is not running", operation="stop")

            if timeout is None:
                timeout = get_config().stop_timeout_seconds

            logger.info("Stopping monitor...")
            self._running = False
            self._stopping = True
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        try:
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout or None)
                if thread.is_alive():
                    logger.warning("Monitor thread %s did not stop within %ss", thread.name, timeout)

            with self._lifecycle_lock:
                self._destroy_observers()
        finally:
            with self._lifecycle_lock:
                self._stopping = False

        logger.info("Monitor stopped")

    def _destroy_observers(self) -> None:
        failures: list[tuple[FileAlterationObserver, Exception]] = []
        for observer in self._observers:
            try:
                observer.destroy()
            except Exception as e:
                logger.error("Failed to destroy %s: %s", observer, e)
                failures.append((observer, e))

        if failures:
            observer, error = failures[0]
            raise ShutdownError(
                f"Failed to destroy {len(failures)} observer(s): {error}",
                component=str(observer),
                shutdown_stage="observer_destroy",
                underlying_error=error,
            ) from error

    def run(self) -> None:
        """Loop body executed on the monitor thread until stop() is called."""
        # Each start() creates a fresh event; a thread outliving its stop() keeps the old one
        stop_event = self._stop_event
        while not stop_event.is_set():
            for observer in self._observers:
                self._scan(observer)
            self._scan_count += 1
            self._last_scan_at = time.time()

            if stop_event.is_set():
                break
            stop_event.wait(self._interval)

    def _scan(self, observer: FileAlterationObserver) -> None:
        try:
            observer.check_and_notify()
        except Exception as e:
            logger.error("Scan failed for %s: %s", observer, e, exc_info=True)

    def _create_thread(self) -> threading.Thread:
        if self._thread_factory is not None:
            return self._thread_factory(self.run)

        config = get_config()
        return threading.Thread(target=self.run, name=config.thread_name, daemon=config.daemon_thread)

    def get_monitoring_stats(self) -> dict[str, Any]:
        """
        Get monitoring statistics.

        Returns:
            Dictionary with monitoring statistics
        """
        return {
            "monitoring_active": self._running,
            "interval_seconds": self._interval,
            "observer_count": len(self._observers),
            "observed_directories": [str(observer.directory) for observer in self._observers],
            "scan_count": self._scan_count,
            "last_scan_at": self._last_scan_at,
        }

    def __str__(self) -> str:
        return f"{type(self).__name__}[interval={self._interval}s, observers={len(self._observers)}]"
