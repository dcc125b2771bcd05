"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from mock_pyth.clock import ManualClock
from mock_pyth.codec import create_price_feed_update_data
from mock_pyth.config import AppConfig, OracleConfig, WebhookConfig
from mock_pyth.events import EventLog
from mock_pyth.models import Price, PriceFeed, to_price_id
from mock_pyth.oracle import MockPyth
from mock_pyth.payments import InMemoryLedger

ID_AA = to_price_id("0xaa")
ID_BB = to_price_id("0xbb")


def make_feed(
    price_id: bytes = ID_AA,
    price: int = 100,
    publish_time: int = 10,
    conf: int = 1,
    expo: int = -8,
) -> PriceFeed:
    return PriceFeed(
        id=price_id,
        price=Price(price=price, conf=conf, expo=expo, publish_time=publish_time),
        ema_price=Price(price=price, conf=conf, expo=expo, publish_time=publish_time),
    )


def make_update(
    price_id: bytes = ID_AA,
    price: int = 100,
    publish_time: int = 10,
    conf: int = 1,
    expo: int = -8,
) -> bytes:
    return create_price_feed_update_data(
        price_id, price, conf, expo, price, conf, publish_time
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def oracle_config() -> OracleConfig:
    return OracleConfig(valid_time_period=60, single_update_fee_in_wei=1)


@pytest.fixture()
def sample_app_config(oracle_config: OracleConfig) -> AppConfig:
    return AppConfig(
        oracle=oracle_config,
        webhook=WebhookConfig(enabled=True, url="https://hooks.example.com/pyth"),
    )


# ---------------------------------------------------------------------------
# Oracle fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(now=10)


@pytest.fixture()
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture()
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture()
def oracle(
    oracle_config: OracleConfig,
    ledger: InMemoryLedger,
    event_log: EventLog,
    clock: ManualClock,
) -> MockPyth:
    return MockPyth(oracle_config, payments=ledger, sinks=[event_log], clock=clock)


# ---------------------------------------------------------------------------
# YAML fixtures
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    oracle:
      valid_time_period: 120
      single_update_fee_in_wei: 3
    webhook:
      enabled: true
      url: "https://hooks.example.com/pyth"
      timeout: 5
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


SAMPLE_SCENARIO = textwrap.dedent("""\
    now: 10
    steps:
      - action: update
        payment: 1
        feeds:
          - {id: "0xaa", price: 100, publish_time: 10}
      - action: update
        payment: 1
        feeds:
          - {id: "0xaa", price: 200, publish_time: 5}
      - action: query
        id: "0xaa"
        expect: {price: 100, publish_time: 10}
      - action: request
        requester: consumer
        payer: keeper
        ids: ["0xaa"]
        payment: 1
        feeds:
          - {id: "0xaa", price: 150, publish_time: 20}
      - action: resolve
        caller: consumer
        ids: ["0xaa"]
        payment: 4
      - action: resolve
        caller: consumer
        ids: ["0xaa"]
        expect_error: RequirePriceFeeds
""")


@pytest.fixture()
def sample_scenario_path(tmp_path: Path) -> Path:
    path = tmp_path / "scenario.yaml"
    path.write_text(SAMPLE_SCENARIO)
    return path
