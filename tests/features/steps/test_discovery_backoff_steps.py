"""Behavioural tests for the worker pool's shared backoff."""
# ruff: noqa: D103

from __future__ import annotations

import threading
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from fontsources.catalogue import FontSource
from fontsources.discovery import (
    DiscoveryPool,
    DiscoveryRun,
    PoolSettings,
    RateLimitedError,
)
from fontsources.registry import DiscoveryTarget


class _FirstProbeThrottled:
    def __init__(self, parties: int) -> None:
        self._barrier = threading.Barrier(parties, timeout=5)
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def discover(self, target: DiscoveryTarget) -> FontSource:
        with self._lock:
            first = target.repo_url not in self._seen
            self._seen.add(target.repo_url)
        if first:
            self._barrier.wait()
            raise RateLimitedError(target.repo_url, 0.01)
        return FontSource(repo_url=target.repo_url, rev="0" * 40)


class StepContext(typ.TypedDict, total=False):
    """State shared between BDD steps in this module."""

    targets: list[DiscoveryTarget]
    announced: list[RateLimitedError]
    run: DiscoveryRun


@scenario(
    "../discovery_backoff.feature",
    "Workers throttled together share one cooldown",
)
def test_shared_cooldown() -> None:
    """Simultaneous throttling produces a single cooldown."""


@pytest.fixture
def context() -> StepContext:
    return {}


@given(
    parsers.parse(
        "{count:d} repositories that are each throttled on their first probe"
    ),
    target_fixture="context",
)
def given_throttled_repositories(context: StepContext, count: int) -> StepContext:
    context["targets"] = [
        DiscoveryTarget(f"https://github.com/googlefonts/family{index}", f"F{index}")
        for index in range(count)
    ]
    return context


@when(parsers.parse("discovery runs with {workers:d} workers"))
def when_discovery_runs(context: StepContext, workers: int) -> None:
    announced: list[RateLimitedError] = []
    pool = DiscoveryPool(
        _FirstProbeThrottled(len(context["targets"])),
        PoolSettings(workers=workers, poll_interval=0.001),
        on_cooldown=announced.append,
    )
    context["run"] = pool.run(context["targets"])
    context["announced"] = announced


@then("every repository is discovered")
def then_all_discovered(context: StepContext) -> None:
    discovered = {source.repo_url for source in context["run"].sources}
    assert discovered == {target.repo_url for target in context["targets"]}
    assert context["run"].failures == {}


@then("exactly one cooldown is announced")
def then_one_cooldown(context: StepContext) -> None:
    assert len(context["announced"]) == 1
    assert context["run"].cooldowns == 1
