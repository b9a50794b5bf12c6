"""Unit tests for the discovery worker pool and its shared backoff."""
# ruff: noqa: D103

from __future__ import annotations

import threading
import time

import pytest

from fontsources.catalogue import FontSource
from fontsources.discovery import (
    DiscoveryPool,
    NoConfigFoundError,
    PoolSettings,
    RateLimitedError,
    RateLimitExhaustedError,
    RateLimitFlag,
)
from fontsources.errors import FontSourcesError
from fontsources.registry import DiscoveryTarget


def _target(name: str) -> DiscoveryTarget:
    return DiscoveryTarget(f"https://github.com/googlefonts/{name}", name)


def _source(target: DiscoveryTarget) -> FontSource:
    return FontSource(
        repo_url=target.repo_url,
        rev="0" * 40,
        config_files=["sources/config.yaml"],
    )


class _RecordingSleep:
    """Record sleeps and yield the thread briefly instead of blocking."""

    def __init__(self) -> None:
        self.durations: list[float] = []
        self._lock = threading.Lock()

    def __call__(self, seconds: float) -> None:
        with self._lock:
            self.durations.append(seconds)
        time.sleep(0.001)


class _ThrottledOnce:
    """Throttle every target once, with all first attempts in flight together."""

    def __init__(self, parties: int, retry_after: float = 42.0) -> None:
        self._barrier = threading.Barrier(parties, timeout=5)
        self._seen: set[str] = set()
        self._lock = threading.Lock()
        self.retry_after = retry_after

    def discover(self, target: DiscoveryTarget) -> FontSource:
        with self._lock:
            first = target.repo_url not in self._seen
            self._seen.add(target.repo_url)
        if first:
            self._barrier.wait()
            raise RateLimitedError(target.repo_url, self.retry_after)
        return _source(target)


class _AlwaysThrottled:
    def __init__(self) -> None:
        self.attempts = 0

    def discover(self, target: DiscoveryTarget) -> FontSource:
        self.attempts += 1
        raise RateLimitedError(target.repo_url, 1.0)


class _Scripted:
    """Answer each target from a map of name to source or exception."""

    def __init__(self, outcomes: dict[str, Exception | None]) -> None:
        self._outcomes = outcomes

    def discover(self, target: DiscoveryTarget) -> FontSource:
        outcome = self._outcomes.get(target.name)
        if outcome is not None:
            raise outcome
        return _source(target)


def test_rate_limit_flag_claims_once_per_generation() -> None:
    flag = RateLimitFlag()

    assert flag.try_claim(0)
    assert flag.is_set()
    assert not flag.try_claim(0)

    flag.release()

    assert not flag.is_set()
    assert flag.generation == 1
    assert not flag.try_claim(0)
    assert flag.try_claim(1)


def test_simultaneous_rate_limits_share_one_cooldown() -> None:
    targets = [_target(f"family{index}") for index in range(6)]
    sleep = _RecordingSleep()
    announced: list[RateLimitedError] = []
    flag = RateLimitFlag()
    pool = DiscoveryPool(
        _ThrottledOnce(len(targets)),
        PoolSettings(workers=len(targets), poll_interval=0.01),
        sleep=sleep,
        on_cooldown=announced.append,
    )

    run = pool.run(targets, flag)

    assert [source.repo_url for source in run.sources] == sorted(
        target.repo_url for target in targets
    )
    assert run.failures == {}
    assert run.cooldowns == 1
    assert len(announced) == 1
    assert sleep.durations.count(42.0) == 1
    assert not flag.is_set()
    assert flag.generation == 1


def test_rate_limit_retries_are_bounded() -> None:
    discoverer = _AlwaysThrottled()
    target = _target("bangers")
    pool = DiscoveryPool(
        discoverer,
        PoolSettings(workers=1, poll_interval=0.01, max_rate_limit_retries=2),
        sleep=_RecordingSleep(),
    )

    run = pool.run([target])

    error = run.failures[target.repo_url]
    assert isinstance(error, RateLimitExhaustedError)
    assert error.attempts == 3
    assert discoverer.attempts == 3
    assert run.cooldowns == 2
    assert run.sources == []


def test_every_target_reports_exactly_once() -> None:
    targets = [_target(name) for name in ("delta", "alpha", "charlie", "bravo")]
    pool = DiscoveryPool(
        _Scripted(
            {
                "bravo": NoConfigFoundError("https://github.com/googlefonts/bravo"),
                "charlie": RuntimeError("boom"),
            }
        ),
        PoolSettings(workers=2),
    )

    run = pool.run(targets)

    assert [source.repo_url for source in run.sources] == [
        "https://github.com/googlefonts/alpha",
        "https://github.com/googlefonts/delta",
    ]
    assert set(run.failures) == {
        "https://github.com/googlefonts/bravo",
        "https://github.com/googlefonts/charlie",
    }
    unexpected = run.failures["https://github.com/googlefonts/charlie"]
    assert isinstance(unexpected, FontSourcesError)
    assert "boom" in str(unexpected)
    assert run.cooldowns == 0


def test_empty_run() -> None:
    run = DiscoveryPool(_Scripted({})).run([])

    assert run.sources == []
    assert run.failures == {}


@pytest.mark.parametrize("workers", [1, 4])
def test_results_do_not_depend_on_pool_size(workers: int) -> None:
    targets = [_target(f"family{index}") for index in range(10)]
    pool = DiscoveryPool(_Scripted({}), PoolSettings(workers=workers))

    run = pool.run(targets)

    assert run.sources == sorted(
        (_source(target) for target in targets), key=lambda s: s.repo_url
    )
