"""Parallel discovery with a shared rate-limit backoff.

Each repository is one task on a thread pool. Tasks share exactly one piece
of mutable state, a :class:`RateLimitFlag`. When any task is throttled, one
task claims the flag, announces the cooldown, sleeps, and releases it; every
other task waits for the release before probing again. All outcomes flow to
a single collector over a queue, and the collector returns once every task
has reported exactly once.
"""

from __future__ import annotations

import concurrent.futures
import dataclasses
import enum
import queue
import threading
import time
import typing as typ

from fontsources.catalogue.models import source_sort_key
from fontsources.errors import FontSourcesError
from fontsources.logging import (
    get_logger,
    log_debug,
    log_exception,
    log_info,
    log_warning,
)

from .errors import RateLimitedError, RateLimitExhaustedError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from fontsources.catalogue.models import FontSource
    from fontsources.registry.candidates import DiscoveryTarget

logger = get_logger(__name__)

DEFAULT_WORKERS = 8
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_MAX_RATE_LIMIT_RETRIES = 5
_PROGRESS_STEPS = 10


class Discoverer(typ.Protocol):
    """Anything that discovers one source per target."""

    def discover(self, target: DiscoveryTarget) -> FontSource:
        """Return the source for ``target`` or raise a discovery error."""
        ...


class RateLimitFlag:
    """Atomic boolean shared by all tasks of one pool run.

    The flag also counts completed cooldowns. A task that was throttled may
    only claim the flag if no cooldown has finished since its probe started;
    otherwise the throttling it saw has already been waited out.
    """

    def __init__(self) -> None:
        """Initialise a clear flag at generation zero."""
        self._lock = threading.Lock()
        self._set = False
        self._generation = 0

    @property
    def generation(self) -> int:
        """Return the number of cooldowns completed so far."""
        with self._lock:
            return self._generation

    def is_set(self) -> bool:
        """Return True while a cooldown is in progress."""
        with self._lock:
            return self._set

    def try_claim(self, generation: int) -> bool:
        """Set the flag if it is clear and still at ``generation``.

        This is the compare-and-swap that elects the single task responsible
        for a cooldown.
        """
        with self._lock:
            if self._set or self._generation != generation:
                return False
            self._set = True
            return True

    def release(self) -> None:
        """Clear the flag and close the current cooldown generation."""
        with self._lock:
            self._set = False
            self._generation += 1


class TaskState(enum.StrEnum):
    """States of one discovery task."""

    IDLE = "idle"
    PROBING = "probing"
    BACKOFF = "backoff"
    DONE = "done"


@dataclasses.dataclass(frozen=True, slots=True)
class TaskReport:
    """The single terminal message a task sends to the collector."""

    target: DiscoveryTarget
    source: FontSource | None = None
    error: FontSourcesError | None = None
    attempts: int = 1


@dataclasses.dataclass(slots=True)
class DiscoveryRun:
    """Collected results of one pool run.

    Attributes
    ----------
    sources
        Discovered sources, sorted by repository URL, revision, and configs.
    failures
        Terminal errors keyed by repository URL.
    cooldowns
        Number of rate-limit cooldowns served during the run.

    """

    sources: list[FontSource] = dataclasses.field(default_factory=list)
    failures: dict[str, FontSourcesError] = dataclasses.field(default_factory=dict)
    cooldowns: int = 0


@dataclasses.dataclass(frozen=True, slots=True)
class PoolSettings:
    """Tuning knobs for :class:`DiscoveryPool`."""

    workers: int = DEFAULT_WORKERS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES


class _DiscoveryTask:
    """State machine driving one target to a terminal report."""

    def __init__(
        self,
        target: DiscoveryTarget,
        pool: DiscoveryPool,
        flag: RateLimitFlag,
    ) -> None:
        self.target = target
        self._pool = pool
        self._flag = flag
        self.state = TaskState.IDLE
        self.attempts = 0
        self._generation = 0
        self._throttle: RateLimitedError | None = None

    def run(self) -> TaskReport:
        report: TaskReport | None = None
        while report is None:
            match self.state:
                case TaskState.IDLE:
                    self._idle()
                case TaskState.PROBING:
                    report = self._probe()
                case TaskState.BACKOFF:
                    self._backoff()
                case TaskState.DONE:
                    msg = "task finished without a report"
                    raise RuntimeError(msg)
        self.state = TaskState.DONE
        return report

    def _idle(self) -> None:
        if self._flag.is_set():
            self._pool.sleep(self._pool.settings.poll_interval)
            return
        self._generation = self._flag.generation
        self.state = TaskState.PROBING

    def _probe(self) -> TaskReport | None:
        self.attempts += 1
        try:
            source = self._pool.discoverer.discover(self.target)
        except RateLimitedError as exc:
            if self.attempts > self._pool.settings.max_rate_limit_retries:
                error = RateLimitExhaustedError(self.target.repo_url, self.attempts)
                return TaskReport(self.target, error=error, attempts=self.attempts)
            self._throttle = exc
            self.state = TaskState.BACKOFF
            return None
        except FontSourcesError as exc:
            return TaskReport(self.target, error=exc, attempts=self.attempts)
        return TaskReport(self.target, source=source, attempts=self.attempts)

    def _backoff(self) -> None:
        throttle = typ.cast("RateLimitedError", self._throttle)
        if self._flag.try_claim(self._generation):
            self._pool.announce_cooldown(throttle)
            try:
                self._pool.sleep(throttle.retry_after)
            finally:
                self._flag.release()
        self._throttle = None
        self.state = TaskState.IDLE


class DiscoveryPool:
    """Run a :class:`Discoverer` over many targets on a thread pool.

    Parameters
    ----------
    discoverer
        Per-repository discovery, usually a ``ConfigDiscoveryEngine``.
    settings
        Pool size, spin-wait interval, and rate-limit retry budget.
    sleep
        Blocking sleep used for spin-waits and cooldowns.
    on_cooldown
        Optional hook called once per announced cooldown.

    """

    def __init__(
        self,
        discoverer: Discoverer,
        settings: PoolSettings | None = None,
        *,
        sleep: cabc.Callable[[float], None] = time.sleep,
        on_cooldown: cabc.Callable[[RateLimitedError], None] | None = None,
    ) -> None:
        """Initialise the pool."""
        self.discoverer = discoverer
        self.settings = settings or PoolSettings()
        self.sleep = sleep
        self._on_cooldown = on_cooldown
        self._cooldowns = 0
        self._cooldown_lock = threading.Lock()

    def announce_cooldown(self, throttle: RateLimitedError) -> None:
        """Log a cooldown; called only by the task that claimed the flag."""
        with self._cooldown_lock:
            self._cooldowns += 1
        log_warning(
            logger,
            "rate limited (%s); pausing all workers for %.0fs",
            throttle.repo_url,
            throttle.retry_after,
        )
        if self._on_cooldown is not None:
            self._on_cooldown(throttle)

    def run(
        self,
        targets: cabc.Sequence[DiscoveryTarget],
        flag: RateLimitFlag | None = None,
    ) -> DiscoveryRun:
        """Discover every target and collect the results.

        Blocks until every target has produced exactly one report. Sources
        come back sorted regardless of completion order.
        """
        rate_limit = flag or RateLimitFlag()
        reports: queue.Queue[TaskReport] = queue.Queue()
        self._cooldowns = 0

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.settings.workers,
            thread_name_prefix="fontsources-discovery",
        ) as executor:
            for target in targets:
                executor.submit(self._run_task, target, rate_limit, reports)
            result = self._collect(reports, len(targets))

        result.cooldowns = self._cooldowns
        return result

    def _run_task(
        self,
        target: DiscoveryTarget,
        flag: RateLimitFlag,
        reports: queue.Queue[TaskReport],
    ) -> None:
        try:
            report = _DiscoveryTask(target, self, flag).run()
        except Exception as exc:  # noqa: BLE001 - every task must report once
            log_exception(logger, f"{target.repo_url}: unexpected failure", exc)
            error = FontSourcesError(f"unexpected failure: {exc!r}")
            report = TaskReport(target, error=error)
        reports.put(report)

    def _collect(self, reports: queue.Queue[TaskReport], total: int) -> DiscoveryRun:
        result = DiscoveryRun()
        step = max(1, total // _PROGRESS_STEPS)
        for done in range(1, total + 1):
            report = reports.get()
            if report.source is not None:
                result.sources.append(report.source)
                log_debug(
                    logger,
                    "%s: %s",
                    report.target.repo_url,
                    report.source.config_files,
                )
            elif report.error is not None:
                result.failures[report.target.repo_url] = report.error
                log_warning(logger, "%s: %s", report.target.repo_url, report.error)
            if done % step == 0 or done == total:
                log_info(logger, "discovery progress: %d/%d repositories", done, total)

        result.sources.sort(key=source_sort_key)
        return result
