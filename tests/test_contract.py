"""Tests for contract bindings."""

from __future__ import annotations

import asyncio

import pytest

from tessera.chain.contract import ContractBinding
from tessera.config import erc20_abi
from tessera.errors import EncodingError, NotFoundError
from tessera.keys.accounts import from_private_key

from conftest import RECIPIENT, TEST_ADDRESS, TEST_PRIVATE_KEY, TOKEN, FakeNode


def _bind(node: FakeNode, signed: bool = False, abi=None) -> ContractBinding:
    signer = from_private_key(TEST_PRIVATE_KEY).signer if signed else None
    return ContractBinding.bind(TOKEN, abi or erc20_abi(), node.transport(), signer=signer)


def test_read_only_call_has_no_sender(node: FakeNode) -> None:
    node.token(TOKEN, symbol="RO")
    contract = _bind(node)

    assert asyncio.run(contract.call("symbol")) == "RO"
    (tx, block) = node.params_of("eth_call")[0]
    assert "from" not in tx
    assert block == "latest"


def test_signed_call_sets_sender(node: FakeNode) -> None:
    node.token(TOKEN, balances={TEST_ADDRESS: 9})
    contract = _bind(node, signed=True)

    assert asyncio.run(contract.call("balanceOf", TEST_ADDRESS)) == 9
    assert node.params_of("eth_call")[0][0]["from"] == TEST_ADDRESS


def test_read_only_binding_cannot_build_transactions(node: FakeNode) -> None:
    with pytest.raises(NotFoundError, match="no signer"):
        _bind(node).build_call("transfer", [RECIPIENT, 1])


def test_estimate_gas_with_value(node: FakeNode) -> None:
    contract = _bind(node, signed=True)

    gas = asyncio.run(contract.estimate_gas("transfer", RECIPIENT, 1, value=7))

    assert gas == 50_000
    (call,) = node.params_of("eth_estimateGas")[0]
    assert call["value"] == hex(7)
    assert call["data"].startswith("0xa9059cbb")


def test_bind_rejects_bad_abi(node: FakeNode) -> None:
    with pytest.raises(EncodingError):
        _bind(node, abi=[{"type": "function", "inputs": "nope", "name": "x"}])


def test_call_with_wrong_arguments_makes_no_request(node: FakeNode) -> None:
    with pytest.raises(EncodingError):
        asyncio.run(_bind(node).call("balanceOf", "not-an-address"))
    assert "eth_call" not in node.methods
