"""Tests for the database bootstrap script."""

from __future__ import annotations

import argparse

import pytest

from solplace import init_db as init_db_module


def test_parse_airdrop() -> None:
    identity, lamports = init_db_module._parse_airdrop("ab" * 32 + "=500")
    assert identity == bytes([0xAB]) * 32
    assert lamports == 500

    with pytest.raises(argparse.ArgumentTypeError):
        init_db_module._parse_airdrop("zz=1")


def test_main_seeds_mints_and_airdrops(mocker) -> None:
    seed = mocker.patch.object(init_db_module, "init_db")
    init_db_module.main(["--mint", "01" * 32, "--airdrop", "02" * 32 + "=10", "--reset"])
    seed.assert_called_once_with([bytes([1]) * 32], [(bytes([2]) * 32, 10)], reset=True)
