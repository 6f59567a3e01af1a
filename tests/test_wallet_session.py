"""
Tests for the single-tenant wallet session manager.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from intent_agent.core.errors import ChainCallFailedError, InvalidAddressFormatError, NotConnectedError
from intent_agent.core.wallet import (
    ReadWriteLock,
    WalletKind,
    WalletSessionManager,
    WalletType,
    format_eth,
)

from fakes import PROJECT_A, RPC_URL, WALLET


def _manager(balance=0):
    w3 = MagicMock()
    w3.eth.get_balance = AsyncMock(return_value=balance)
    return WalletSessionManager(RPC_URL, w3=w3), w3


@pytest.mark.parametrize(
    "raw, kind, label",
    [
        ("metamask", WalletKind.METAMASK, None),
        ("MetaMask", WalletKind.METAMASK, None),
        ("walletconnect", WalletKind.WALLETCONNECT, None),
        ("coinbase", WalletKind.COINBASE, None),
        ("phantom", WalletKind.PHANTOM, None),
        ("trustwallet", WalletKind.OTHER, "TrustWallet"),
        ("rainbow", WalletKind.OTHER, "Rainbow"),
        ("argent", WalletKind.OTHER, "Argent"),
        ("Frame", WalletKind.OTHER, "Frame"),
    ],
)
def test_wallet_type_parsing(raw, kind, label):
    wallet_type = WalletType.parse(raw)
    assert wallet_type.kind is kind
    assert wallet_type.label == label


def test_format_eth_six_places():
    assert format_eth(1234500000000000000) == "1.234500"
    assert format_eth(0) == "0.000000"


@pytest.mark.asyncio
async def test_reconnect_replaces_session():
    manager, _ = _manager()

    await manager.connect(PROJECT_A, 1, WalletType.parse("metamask"))
    await manager.connect(WALLET, 97, WalletType.parse("rainbow"))

    session = await manager.get_session()
    assert session.address == WALLET
    assert session.chain_id == 97
    assert session.wallet_type.display_name == "Rainbow"
    assert session.provider_url == RPC_URL


@pytest.mark.asyncio
async def test_disconnect_is_idempotent():
    manager, _ = _manager()
    await manager.connect(WALLET, 97, WalletType.parse("metamask"))

    assert await manager.disconnect() is True
    assert await manager.disconnect() is False
    assert await manager.is_connected() is False


@pytest.mark.asyncio
async def test_connect_rejects_malformed_address():
    manager, _ = _manager()

    with pytest.raises(InvalidAddressFormatError):
        await manager.connect("0xnope", 97, WalletType.parse("metamask"))
    assert await manager.get_session() is None


@pytest.mark.asyncio
async def test_balance_requires_session():
    manager, w3 = _manager()

    with pytest.raises(NotConnectedError):
        await manager.get_balance()
    w3.eth.get_balance.assert_not_awaited()


@pytest.mark.asyncio
async def test_balance_of_connected_wallet():
    manager, w3 = _manager(balance=2 * 10 ** 18)
    await manager.connect(WALLET, 97, WalletType.parse("metamask"))

    balance = await manager.get_balance()

    assert balance.wei == str(2 * 10 ** 18)
    assert balance.eth == "2.000000"
    w3.eth.get_balance.assert_awaited_once_with(WALLET)


@pytest.mark.asyncio
async def test_balance_transport_failure():
    manager, w3 = _manager()
    w3.eth.get_balance = AsyncMock(side_effect=ConnectionError("down"))
    await manager.connect(WALLET, 97, WalletType.parse("metamask"))

    with pytest.raises(ChainCallFailedError):
        await manager.get_balance()


@pytest.mark.asyncio
async def test_sign_message_is_labeled_placeholder():
    manager, _ = _manager()
    await manager.connect(WALLET, 97, WalletType.parse("metamask"))

    signed = await manager.sign_message("hello")

    assert signed["signature"] == "signed:hello"
    assert signed["authoritative"] is False


@pytest.mark.asyncio
async def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = 0
    peak = 0

    async def reader():
        nonlocal inside, peak
        async with lock.read():
            inside += 1
            peak = max(peak, inside)
            await asyncio.sleep(0.01)
            inside -= 1

    await asyncio.gather(reader(), reader(), reader())
    assert peak == 3


@pytest.mark.asyncio
async def test_writer_is_exclusive():
    lock = ReadWriteLock()
    log = []

    async def reader(name):
        async with lock.read():
            log.append(f"{name}:in")
            await asyncio.sleep(0.01)
            log.append(f"{name}:out")

    async def writer():
        async with lock.write():
            log.append("w:in")
            await asyncio.sleep(0.01)
            log.append("w:out")

    await asyncio.gather(reader("r1"), writer(), reader("r2"))

    w_in = log.index("w:in")
    assert log[w_in + 1] == "w:out"
