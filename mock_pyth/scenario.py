"""Scenario replay — drives a MockPyth instance from a YAML step list."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from . import errors
from .clock import ManualClock
from .codec import create_price_feed_update_data
from .models import format_price_id, to_price_id
from .oracle import MockPyth

logger = logging.getLogger(__name__)


class ScenarioError(ValueError):
    """The scenario file is malformed."""


@dataclass(frozen=True)
class Scenario:
    now: int
    steps: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class StepResult:
    index: int
    action: str
    ok: bool
    detail: str = ""


def load_scenario(path: str | Path) -> Scenario:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    steps = raw.get("steps")
    if not isinstance(steps, list) or not steps:
        raise ScenarioError(f"Scenario {path} has no steps")
    for i, step in enumerate(steps):
        if not isinstance(step, dict) or "action" not in step:
            raise ScenarioError(f"Step {i} has no action")
        if step["action"] not in _ACTIONS:
            raise ScenarioError(f"Step {i} has unknown action '{step['action']}'")

    return Scenario(now=int(raw.get("now", 0)), steps=tuple(steps))


# ---------------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------------


def _pid(value: Any) -> bytes:
    # YAML reads unquoted 0xaa as an int
    return to_price_id(value if isinstance(value, int) else str(value))


def _ids(step: dict[str, Any]) -> list[bytes]:
    return [_pid(pid) for pid in step.get("ids", [])]


def _update_data(step: dict[str, Any]) -> list[bytes]:
    data: list[bytes] = []
    for feed in step.get("feeds", []):
        if "raw" in feed:
            data.append(bytes.fromhex(str(feed["raw"]).removeprefix("0x")))
            continue
        price = int(feed["price"])
        conf = int(feed.get("conf", 0))
        data.append(
            create_price_feed_update_data(
                _pid(feed["id"]),
                price,
                conf,
                int(feed.get("expo", 0)),
                int(feed.get("ema_price", price)),
                int(feed.get("ema_conf", conf)),
                int(feed["publish_time"]),
            )
        )
    return data


def _check_expected(actual: dict[str, int], expected: dict[str, Any]) -> str:
    mismatches = [
        f"{key}: expected {value}, got {actual.get(key)}"
        for key, value in expected.items()
        if actual.get(key) != value
    ]
    return "; ".join(mismatches)


# ---------------------------------------------------------------------------
# Actions; each returns a detail string or raises
# ---------------------------------------------------------------------------


def _do_set_time(oracle: MockPyth, clock: ManualClock, step: dict[str, Any]) -> str:
    if "now" in step:
        clock.set(int(step["now"]))
    else:
        clock.advance(int(step.get("advance", 0)))
    return f"now={clock.now}"


def _do_update(oracle: MockPyth, clock: ManualClock, step: dict[str, Any]) -> str:
    data = _update_data(step)
    oracle.update_price_feeds(data, int(step.get("payment", 0)))
    return f"{len(data)} updates, sequence={oracle.sequence_number}"


def _do_query(oracle: MockPyth, clock: ManualClock, step: dict[str, Any]) -> str:
    price_id = _pid(step["id"])
    if step.get("fresh"):
        price = oracle.get_price(price_id)
    else:
        price = oracle.get_price_unsafe(price_id)
    actual = {
        "price": price.price,
        "conf": price.conf,
        "expo": price.expo,
        "publish_time": price.publish_time,
    }
    mismatch = _check_expected(actual, step.get("expect", {}))
    if mismatch:
        raise AssertionError(mismatch)
    return f"{format_price_id(price_id)} price={price.price} time={price.publish_time}"


def _do_parse(oracle: MockPyth, clock: ManualClock, step: dict[str, Any]) -> str:
    parse = (
        oracle.parse_price_feed_updates_unique
        if step.get("unique")
        else oracle.parse_price_feed_updates
    )
    feeds = parse(
        _update_data(step),
        _ids(step),
        int(step.get("min_time", 0)),
        int(step.get("max_time", (1 << 64) - 1)),
        int(step.get("payment", 0)),
    )
    return ", ".join(
        f"{format_price_id(f.id)}@{f.price.publish_time}" for f in feeds
    )


def _do_request(oracle: MockPyth, clock: ManualClock, step: dict[str, Any]) -> str:
    key = oracle.update_price_feeds_on_behalf_of(
        str(step["requester"]),
        _ids(step),
        _update_data(step),
        int(step.get("payment", 0)),
        str(step["payer"]),
    )
    return f"correlation=0x{key.hex()}"


def _do_resolve(oracle: MockPyth, clock: ManualClock, step: dict[str, Any]) -> str:
    key = oracle.require_price_feeds(
        str(step["caller"]), _ids(step), int(step.get("payment", 0))
    )
    return f"correlation=0x{key.hex()}"


_ACTIONS = {
    "set_time": _do_set_time,
    "update": _do_update,
    "query": _do_query,
    "parse": _do_parse,
    "request": _do_request,
    "resolve": _do_resolve,
}


def run_scenario(
    oracle: MockPyth, clock: ManualClock, scenario: Scenario
) -> list[StepResult]:
    """Run every step; a step passes when its outcome matches ``expect_error``."""
    clock.set(scenario.now)
    results: list[StepResult] = []

    for index, step in enumerate(scenario.steps):
        action = step["action"]
        expected_error = step.get("expect_error")
        try:
            detail = _ACTIONS[action](oracle, clock, step)
        except (errors.PythError, AssertionError) as e:
            raised = type(e).__name__
            if expected_error == raised:
                results.append(StepResult(index, action, True, f"raised {raised}"))
            else:
                logger.error("Step %d (%s) failed: %s: %s", index, action, raised, e)
                results.append(StepResult(index, action, False, f"{raised}: {e}"))
            continue
        except (ValueError, KeyError, TypeError) as e:
            # Bad step fields never count as an expected oracle error.
            detail = f"malformed step: {type(e).__name__}: {e}"
            logger.error("Step %d (%s) failed: %s", index, action, detail)
            results.append(StepResult(index, action, False, detail))
            continue

        if expected_error:
            detail = f"expected {expected_error}, nothing raised"
            logger.error("Step %d (%s) failed: %s", index, action, detail)
            results.append(StepResult(index, action, False, detail))
        else:
            logger.info("Step %d (%s): %s", index, action, detail)
            results.append(StepResult(index, action, True, detail))

    return results
