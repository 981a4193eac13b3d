from __future__ import annotations

import textwrap

import pytest

from pairpool.config import PoolConfig, load_config
from pairpool.constants import MIN_OPERATING_RESERVE, REQUIRED_MIN_COLLECT_FEES, TRANSFER_GAS
from pairpool.errors import FeeOutOfRangeError, InvalidRecipientError

BASE = dict(
    wallet0="wallet0",
    wallet1="wallet1",
    router_address="router",
    provider_fee_address="providers",
    protocol_fee_address="treasury",
)


def test_defaults() -> None:
    cfg = PoolConfig(**BASE)
    assert (cfg.lp_fee_bps, cfg.protocol_fee_bps, cfg.ref_fee_bps) == (20, 10, 10)
    assert cfg.min_collect_fees == REQUIRED_MIN_COLLECT_FEES
    assert cfg.transfer_gas == TRANSFER_GAS
    assert cfg.min_operating_reserve == MIN_OPERATING_RESERVE
    assert cfg.fee_schedule().provider_fee_address == "providers"


def test_load_yaml(tmp_path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text(
        textwrap.dedent(
            """
            wallet0: EQ-token0
            wallet1: EQ-token1
            router_address: EQ-router
            provider_fee_address: EQ-providers
            protocol_fee_address: EQ-treasury
            lp_fee_bps: 25
            min_collect_fees: 500
            """
        ),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.wallet0 == "EQ-token0"
    assert cfg.lp_fee_bps == 25
    assert cfg.min_collect_fees == 500


def test_load_yaml_with_pool_section(tmp_path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text(
        "pool:\n"
        "  wallet0: a\n"
        "  wallet1: b\n"
        "  router_address: r\n"
        "  provider_fee_address: p\n"
        "  protocol_fee_address: t\n",
        encoding="utf-8",
    )
    assert PoolConfig.from_file(str(path)).router_address == "r"


def test_empty_file(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="is empty"):
        load_config(path)


def test_unknown_keys() -> None:
    with pytest.raises(ValueError, match="unknown pool config keys: fee_tier"):
        PoolConfig.from_dict({**BASE, "fee_tier": 3})


def test_not_a_mapping() -> None:
    with pytest.raises(ValueError, match="must be a mapping"):
        PoolConfig.from_dict(["wallet0"])  # type: ignore[arg-type]


def test_wallets_must_differ() -> None:
    with pytest.raises(ValueError, match="must differ"):
        PoolConfig(**{**BASE, "wallet1": "wallet0"})


@pytest.mark.parametrize("name", ["wallet0", "router_address"])
def test_blank_identity(name) -> None:
    with pytest.raises(ValueError):
        PoolConfig(**{**BASE, name: " "})


def test_fee_out_of_range() -> None:
    with pytest.raises(FeeOutOfRangeError):
        PoolConfig(**BASE, lp_fee_bps=201)


def test_missing_fee_recipient() -> None:
    with pytest.raises(InvalidRecipientError):
        PoolConfig(**{**BASE, "protocol_fee_address": ""})


@pytest.mark.parametrize(
    "overrides, exc",
    [
        ({"min_swap_amount": 0}, ValueError),
        ({"min_collect_fees": 0}, ValueError),
        ({"transfer_gas": -1}, ValueError),
        ({"min_liquidity": "1000"}, TypeError),
        ({"min_operating_reserve": True}, TypeError),
    ],
)
def test_bad_settings(overrides, exc) -> None:
    with pytest.raises(exc):
        PoolConfig(**BASE, **overrides)
