from decimal import Decimal

import pytest

from restake.balance import ETH_DECIMALS, Balance, display_token, is_eth_chain


def test_cosmos_balance():
    b = Balance(48466853, "uphoton")
    assert b.value == Decimal("48.466853")
    assert str(b) == "48.466853 PHOTON"


def test_eth_balance_has_no_scientific_notation():
    b = Balance(1_500_000_000_000_000_000, "adym", ETH_DECIMALS)
    assert str(b) == "1.5 DYM"
    assert str(Balance(12, "afet", ETH_DECIMALS)) == "0.000000000000000012 FET"


def test_round_and_zero_balances():
    assert str(Balance(48_000_000, "uatone")) == "48 ATONE"
    assert str(Balance(0, "uatone")) == "0 ATONE"


@pytest.mark.parametrize(
    "denom, token", [("uphoton", "PHOTON"), ("uatone", "ATONE"), ("adym", "DYM")]
)
def test_display_token(denom, token):
    assert display_token(denom) == token


def test_is_below_uses_integer_part():
    assert Balance(999_999, "uatone").is_below(1)
    assert not Balance(1_000_000, "uatone").is_below(1)
    assert not Balance(0, "uatone").is_below(0)


@pytest.mark.parametrize(
    "chain, expected",
    [
        ("Dymension", True),
        ("dymension", True),
        ("Fetch.ai", True),
        ("Fetch.ai Testnet", True),
        ("AtomOne", False),
        (None, False),
    ],
)
def test_is_eth_chain(chain, expected):
    assert is_eth_chain(chain, ["Dymension", "Fetch.ai"]) is expected
