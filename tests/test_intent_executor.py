"""
Tests for per-intent execution.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from intent_agent.config import ZERO_ADDRESS
from intent_agent.core.chain import ProjectStatistics
from intent_agent.core.chain.models import decode_project
from intent_agent.core.errors import ChainCallFailedError, InvalidAddressFormatError, NotConnectedError
from intent_agent.core.intents import (
    ClaimTokens,
    CreateProject,
    GetProjectInfo,
    GetProjectStatistics,
    GetUserBalance,
    IntentExecutor,
    Invest,
    ListProjects,
    Unknown,
    build_project_parameters,
)
from intent_agent.core.wallet import WalletBalance

from fakes import CONTRACT, PROJECT_A, PROJECT_B, WALLET


def _gateway(chain_id=97):
    gateway = MagicMock()
    gateway.get_chain_id = AsyncMock(return_value=chain_id)
    gateway.get_contract_address = AsyncMock(return_value=CONTRACT)
    return gateway


@pytest.mark.asyncio
async def test_invest_value_is_exact_wei():
    executor = IntentExecutor(_gateway())

    result = await executor.execute(Invest(project_id="0xP", amount=0.5), "invest 0.5 in 0xP")

    tx = result.transaction_descriptor
    assert result.success
    assert tx.to == "0xP"
    assert tx.value == "500000000000000000"
    assert tx.data == "invest:0.5"
    assert tx.description == "Invest 0.5 ETH in project 0xP"
    assert result.data["requires_signing"] is True


@pytest.mark.asyncio
async def test_invest_whole_amount_formatting():
    result = await IntentExecutor(_gateway()).execute(Invest(project_id="0xP", amount=3.0), "")

    assert result.transaction_descriptor.value == "3000000000000000000"
    assert result.transaction_descriptor.data == "invest:3"


@pytest.mark.asyncio
async def test_negative_investment_is_rejected():
    result = await IntentExecutor(_gateway()).execute(Invest(project_id="0xP", amount=-1.0), "")

    assert not result.success
    assert result.transaction_descriptor is None


@pytest.mark.asyncio
async def test_zero_chain_id_is_replaced():
    result = await IntentExecutor(_gateway(chain_id=0)).execute(ClaimTokens(project_id=PROJECT_A), "")

    tx = result.transaction_descriptor
    assert tx.chain_id == 97
    assert tx.value == "0"
    assert tx.data == "claimTokens"


@pytest.mark.asyncio
async def test_create_project_survives_failed_reads():
    gateway = MagicMock()
    gateway.get_chain_id = AsyncMock(side_effect=ChainCallFailedError("down"))
    gateway.get_contract_address = AsyncMock(side_effect=ChainCallFailedError("down"))

    result = await IntentExecutor(gateway).execute(CreateProject(name="Moon", symbol="MOON"), "")

    assert result.success
    assert result.transaction_descriptor.to == ZERO_ADDRESS
    assert result.transaction_descriptor.chain_id == 97
    assert result.data["function_name"] == "createProjectWithTokenViaTelegram"


@pytest.mark.asyncio
async def test_create_project_descriptor():
    result = await IntentExecutor(_gateway(chain_id=56)).execute(CreateProject(name="Moon", symbol="MOON"), "")

    tx = result.transaction_descriptor
    assert tx.to == CONTRACT
    assert tx.chain_id == 56
    assert tx.data == "0x"
    assert tx.description == "Create Moon token with symbol MOON"
    assert result.data["is_contract_call"] is True
    assert result.data["parameters"]["token_name"] == "Moon Token"


def test_project_parameters():
    params = build_project_parameters("Moon", "MOON", now=1_000)

    assert params["creator"] == ZERO_ADDRESS
    assert params["token_decimals"] == 18
    assert params["initial_supply"] == str(1000 * 10 ** 18)
    assert params["soft_cap"] == str(10 ** 18)
    assert params["hard_cap"] == str(10 * 10 ** 18)
    assert params["start_time"] == "1300"
    assert params["end_time"] == str(1300 + 30 * 24 * 3600)
    assert params["token_price"] == str(10 ** 14)
    assert params["tokens_for_sale"] == str(700 * 10 ** 18)
    assert params["liquidity_percent"] == 3000
    assert params["marketing_percent"] == 500
    assert params["marketing_telegram_id"] == "0"


@pytest.mark.asyncio
async def test_unknown_touches_nothing():
    gateway = MagicMock()
    wallet = MagicMock()

    result = await IntentExecutor(gateway, wallet).execute(Unknown(), "flurb the blorp")

    assert not result.success
    assert result.message == "Could not understand intent: flurb the blorp"
    assert gateway.mock_calls == []
    assert wallet.mock_calls == []


@pytest.mark.asyncio
async def test_missing_project_is_not_an_error():
    gateway = _gateway()
    gateway.get_project = AsyncMock(return_value=None)

    result = await IntentExecutor(gateway).execute(GetProjectInfo(project_id=PROJECT_A), "")

    assert not result.success
    assert result.message == f"Project not found: {PROJECT_A}"
    assert result.transaction_descriptor is None


@pytest.mark.asyncio
async def test_malformed_project_id_propagates():
    gateway = _gateway()
    gateway.get_project = AsyncMock(side_effect=InvalidAddressFormatError("0x1"))

    with pytest.raises(InvalidAddressFormatError):
        await IntentExecutor(gateway).execute(GetProjectInfo(project_id="0x1"), "")


@pytest.mark.asyncio
async def test_project_info_and_listing():
    project = decode_project(PROJECT_A, (
        PROJECT_B, PROJECT_B, "Moon", "MOON", 1, 10, 5, 0, 1, 3,
    ))
    gateway = _gateway()
    gateway.get_project = AsyncMock(return_value=project)
    gateway.get_all_projects = AsyncMock(return_value=[project, project])
    executor = IntentExecutor(gateway)

    info = await executor.execute(GetProjectInfo(project_id=PROJECT_A), "")
    listing = await executor.execute(ListProjects(), "")

    assert info.message == "Project information retrieved"
    assert info.data["project"]["name"] == "Moon"
    assert listing.message == "Found 2 projects"
    assert listing.data["count"] == 2
    assert info.transaction_descriptor is None
    assert listing.transaction_descriptor is None


@pytest.mark.asyncio
async def test_statistics():
    gateway = _gateway()
    gateway.get_project_statistics = AsyncMock(
        return_value=ProjectStatistics(10, 3, 5, "2500000000000000000", 42)
    )

    result = await IntentExecutor(gateway).execute(GetProjectStatistics(), "")

    assert result.data["statistics"]["total_raised"] == "2500000000000000000"
    assert result.transaction_descriptor is None


@pytest.mark.asyncio
async def test_balance_without_wallet():
    wallet = MagicMock()
    wallet.get_balance = AsyncMock(side_effect=NotConnectedError())

    result = await IntentExecutor(_gateway(), wallet).execute(GetUserBalance(), "")

    assert not result.success
    assert "connect your wallet" in result.message.lower()


@pytest.mark.asyncio
async def test_balance_with_wallet():
    wallet = MagicMock()
    wallet.get_balance = AsyncMock(return_value=WalletBalance.from_wei(WALLET, 10 ** 18))

    result = await IntentExecutor(_gateway(), wallet).execute(GetUserBalance(), "")

    assert result.success
    assert result.data["balance"] == str(10 ** 18)
    assert result.data["balance_eth"] == "1.000000"
