"""
Bookings External Integrations
==============================

Process-level services for the bookings module:
- YAML booking policy with watchdog hot-reload
- Per-resource asyncio locks for booking arbitration
- APScheduler job completing bookings whose slot has ended
"""

import asyncio
import threading
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional

import yaml
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pydantic import ValidationError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from campus_booking.bookings.application.services import IBookingPolicyProvider
from campus_booking.bookings.domain import BookingPolicy
from campus_booking.core import ConfigurationException
from campus_booking.resources.application.services import IResourceLocks
from campus_booking.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class PolicyFileHandler(FileSystemEventHandler):
    """Watchdog event handler for booking policy file changes."""

    def __init__(self, policy_manager: "BookingPolicyManager", policy_path: Path):
        self.policy_manager = policy_manager
        self.policy_path = policy_path
        super().__init__()

    def _maybe_reload(self, path: str) -> None:
        if Path(path).resolve() == self.policy_path.resolve():
            logger.info(f"Booking policy file changed: {path}")
            self.policy_manager.reload()

    def on_modified(self, event):
        """Handle file modification event."""
        if event.is_directory:
            return
        self._maybe_reload(event.src_path)

    def on_created(self, event):
        # Policy file created after startup
        if event.is_directory:
            return
        self._maybe_reload(event.src_path)

    def on_moved(self, event):
        # Atomic saves write a temp file and rename it over the policy
        if event.is_directory:
            return
        self._maybe_reload(event.dest_path)


class BookingPolicyManager(IBookingPolicyProvider):
    """
    Thread-safe booking policy holder with hot-reload support.

    Uses watchdog to monitor the YAML file and reload the policy without
    restarting the service. A file that fails validation leaves the
    previous policy in place.
    """

    def __init__(self, policy: Optional[BookingPolicy] = None):
        self._policy: Optional[BookingPolicy] = policy
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._observer = None

    @property
    def source(self) -> str:
        """Where the current policy came from."""
        if self._path is not None and self._path.exists():
            return str(self._path)
        return "defaults"

    def load(self, path: Path) -> BookingPolicy:
        """
        Initial policy load.

        Raises:
            ConfigurationException: If the file exists but is unreadable or invalid
        """
        self._path = Path(path)
        try:
            policy = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            raise ConfigurationException(
                f"Invalid booking policy file: {self._path}", {"error": str(e)}
            ) from e

        with self._lock:
            self._policy = policy
        return policy

    def _load_from_file(self, path: Path) -> BookingPolicy:
        """Load and parse YAML policy file."""
        if not path.exists():
            logger.warning(f"Booking policy file not found: {path}, using defaults")
            return BookingPolicy()

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        return BookingPolicy(**data)

    def reload(self) -> bool:
        """Reload policy from file; keeps the old policy on failure."""
        if self._path is None:
            return False

        try:
            new_policy = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            logger.error(f"Failed to reload booking policy: {e}")
            return False

        with self._lock:
            self._policy = new_policy
        logger.info("Booking policy reloaded successfully")
        return True

    def start_watching(self) -> None:
        """
        Start watching the policy file for changes.

        Skips watching if the file doesn't exist or the platform has no
        file notification support.
        """
        if self._path is None:
            raise RuntimeError("Policy not loaded. Call load() first.")

        if not self._path.exists():
            logger.info(
                f"Policy file doesn't exist, skipping file watch: {self._path}. "
                "Using default booking policy."
            )
            return

        try:
            self._observer = Observer()
            handler = PolicyFileHandler(self, self._path)
            self._observer.schedule(
                handler,
                str(self._path.resolve().parent),
                recursive=False
            )
            self._observer.start()
            logger.info(f"Started watching booking policy file: {self._path}")
        except OSError as e:
            logger.warning(f"File watching not available, using static policy: {e}")
            self._observer = None

    def stop_watching(self) -> None:
        """Stop watching the policy file (safe to call even if not watching)."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    def get_policy(self) -> BookingPolicy:
        """Get current booking policy."""
        with self._lock:
            if self._policy is None:
                raise RuntimeError("Booking policy not loaded")
            return self._policy


class ResourceLockRegistry(IResourceLocks):
    """
    One asyncio.Lock per resource id.

    Serializes writes for a resource within this process; writes for
    different resources proceed concurrently. A lock is dropped once no
    task holds or waits on it, so the registry only grows with the number
    of resources in use at the same time.
    """

    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}
        self._users: Dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, resource_id: int) -> AsyncIterator[None]:
        lock = self._locks.get(resource_id)
        if lock is None:
            lock = self._locks[resource_id] = asyncio.Lock()
        self._users[resource_id] = self._users.get(resource_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[resource_id] -= 1
            if not self._users[resource_id]:
                del self._users[resource_id]
                del self._locks[resource_id]

    def __len__(self) -> int:
        return len(self._locks)


class BookingCompletionScheduler:
    """
    Wrapper for APScheduler running the automatic completion job.

    Manages the lifecycle of the scheduler and its job.
    """

    def __init__(self, interval_seconds: int = 300):
        self.interval_seconds = interval_seconds
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._running = False

    async def start(self, job_func: Callable[[], Awaitable[None]]) -> None:
        """Start the scheduler with the given job function."""
        if self._running:
            logger.warning("Booking completion scheduler already running")
            return

        if self.interval_seconds <= 0:
            logger.info("Booking completion scheduler disabled")
            return

        self._scheduler = AsyncIOScheduler()

        self._scheduler.add_job(
            job_func,
            "interval",
            seconds=self.interval_seconds,
            id="booking_completion",
            name="Booking Completion Job",
            misfire_grace_time=60,
            max_instances=1,
            replace_existing=True
        )

        self._scheduler.start()
        self._running = True

        logger.info(
            "Booking completion scheduler started",
            extra={"interval_seconds": self.interval_seconds}
        )

    async def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if not self._running:
            return

        if self._scheduler:
            self._scheduler.shutdown(wait=False)

        self._running = False
        logger.info("Booking completion scheduler stopped")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._running
