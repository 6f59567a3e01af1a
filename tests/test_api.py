"""
HTTP API tests using FastAPI's TestClient.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from intent_agent.core.intents import IntentKind, IntentResult, TransactionDescriptor
from intent_agent.core.wallet import WalletSessionManager
from intent_agent.main import create_app
from intent_agent.state import ServiceState

from fakes import CONTRACT, RPC_URL, WALLET


def _fake_agent():
    result = IntentResult(
        id="intent-1",
        success=True,
        message="Transaction prepared for investment",
        ai_message="Sign it!",
        intent=IntentKind.INVEST,
        transaction_descriptor=TransactionDescriptor("0xP", "invest:0.5", "500000000000000000", 97, "Invest"),
        data={"action": "invest"},
    )
    agent = MagicMock()
    agent.name = "TeemahAgent"
    agent.read_only = True
    agent.ledger = [result]
    agent.process = AsyncMock(return_value=result)
    agent.process_signed = AsyncMock(return_value=result)
    agent.get_intent = MagicMock(side_effect=lambda intent_id: result if intent_id == "intent-1" else None)
    agent.recent_intents = MagicMock(return_value=[result])
    agent.close = AsyncMock()
    return agent


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.get_balance = AsyncMock(return_value=1234500000000000000)
    return w3


@pytest.fixture
def make_client(w3):
    def _make(agent=None):
        app = create_app()
        app.state.service = ServiceState(WalletSessionManager(RPC_URL, w3=w3), agent=agent)
        return TestClient(app)
    return _make


def _connect(client):
    return client.post("/api/wallet/connect", json={"address": WALLET, "chain_id": 97, "wallet_type": "metamask"})


def test_root_and_hello(make_client):
    with make_client() as client:
        root = client.get("/")
        hello = client.post("/api/hello", json={"name": "Ada"})

    assert root.status_code == 200
    assert root.json()["version"] == "0.1.0"
    assert hello.json()["message"].startswith("Hello Ada")
    assert hello.json()["timestamp"]


def test_health(make_client):
    with make_client() as client:
        data = client.get("/api/health").json()

    assert data == {
        "status": "healthy",
        "version": "0.1.0",
        "agent_initialized": False,
        "wallet_connected": False,
    }


def test_request_id_header(make_client):
    with make_client() as client:
        response = client.get("/api/health", headers={"x-request-id": "req-42"})

    assert response.headers["x-request-id"] == "req-42"


def test_intent_without_agent(make_client):
    with make_client() as client:
        data = client.post("/api/intents", json={"user_input": "show stats"}).json()

    assert data["status"] == "failed"
    assert data["message"] == "Intent agent not initialized. Please initialize the agent first."
    assert data["transaction_data"] is None


def test_intent_with_agent(make_client):
    agent = _fake_agent()
    with make_client(agent) as client:
        data = client.post("/api/intents", json={"user_input": "invest", "idempotency_key": "k1"}).json()

    assert data["intent_id"] == "intent-1"
    assert data["status"] == "completed"
    assert data["transaction_data"]["value"] == "500000000000000000"
    agent.process.assert_awaited_once_with("invest", idempotency_key="k1")


def test_intent_validation_error(make_client):
    with make_client() as client:
        response = client.post("/api/intents", json={})

    assert response.status_code == 422


def test_get_intent(make_client):
    with make_client(_fake_agent()) as client:
        found = client.get("/api/intents/intent-1")
        missing = client.get("/api/intents/nope")

    assert found.status_code == 200
    assert found.json()["intent"] == "Invest"
    assert missing.status_code == 404


def test_list_recent_intents(make_client):
    agent = _fake_agent()
    with make_client() as client:
        empty = client.get("/api/intents").json()
    with make_client(agent) as client:
        listed = client.get("/api/intents", params={"limit": 5}).json()
        rejected = client.get("/api/intents", params={"limit": 0})

    assert empty == []
    assert [item["intent_id"] for item in listed] == ["intent-1"]
    agent.recent_intents.assert_called_once_with(5)
    assert rejected.status_code == 422


def test_signed_intent_requires_wallet(make_client):
    agent = _fake_agent()
    payload = {"user_input": "invest", "signature": "0xsig", "address": WALLET, "chain_id": 97}
    with make_client(agent) as client:
        before = client.post("/api/intents/signed", json=payload).json()
        _connect(client)
        after = client.post("/api/intents/signed", json=payload).json()

    assert before["status"] == "failed"
    assert before["message"] == "No wallet connected"
    assert after["status"] == "completed"
    agent.process_signed.assert_awaited_once()


def test_wallet_lifecycle(make_client):
    with make_client() as client:
        connected = _connect(client).json()
        status = client.get("/api/wallet/status").json()
        balance = client.get("/api/wallet/balance").json()
        disconnected = client.post("/api/wallet/disconnect").json()
        again = client.post("/api/wallet/disconnect").json()
        after = client.get("/api/wallet/status").json()

    assert connected["success"] is True
    assert connected["address"] == WALLET
    assert status["connected"] is True
    assert status["wallet_type"] == "MetaMask"
    assert status["balance_eth"] == "1.234500"
    assert balance == {
        "success": True,
        "balance": "1234500000000000000",
        "balance_eth": "1.234500",
        "message": None,
    }
    assert disconnected["success"] is True
    assert again["success"] is True
    assert after["connected"] is False


def test_wallet_connect_bad_address(make_client):
    with make_client() as client:
        data = client.post(
            "/api/wallet/connect",
            json={"address": "0xnope", "chain_id": 97, "wallet_type": "metamask"},
        ).json()

    assert data["success"] is False


def test_balance_without_wallet(make_client):
    with make_client() as client:
        data = client.get("/api/wallet/balance").json()

    assert data["success"] is False
    assert "No wallet connected" in data["message"]


def test_sign_message(make_client):
    with make_client() as client:
        empty = client.post("/api/wallet/sign-message", json={"message": ""}).json()
        _connect(client)
        signed = client.post("/api/wallet/sign-message", json={"message": "gm"}).json()

    assert empty["success"] is False
    assert signed["signature"] == "signed:gm"
    assert signed["authoritative"] is False


def test_transaction_sign_is_simulated(make_client):
    payload = {
        "transaction_data": {"to": "0xP", "data": "claimTokens", "value": "0", "chain_id": 97, "description": "Claim"},
        "address": WALLET,
        "chain_id": 97,
    }
    with make_client() as client:
        rejected = client.post("/api/transactions/sign", json=payload).json()
        _connect(client)
        simulated = client.post("/api/transactions/sign", json=payload).json()

    assert rejected["success"] is False
    assert simulated["success"] is True
    assert simulated["simulated"] is True
    assert len(simulated["transaction_hash"]) == 66


def test_agent_initialize_and_status(make_client):
    with make_client() as client:
        before = client.get("/api/agent/status").json()
        init = client.post(
            "/api/agent/initialize",
            json={"deepseek_api_key": "test-key", "rpc_url": RPC_URL, "contract_address": CONTRACT},
        ).json()
        after = client.get("/api/agent/status").json()

    assert before["initialized"] is False
    assert before["status"] == "uninitialized"
    assert init["success"] is True
    assert init["agent_name"] == "TeemahAgent"
    assert init["read_only"] is True
    assert init["wallet_required"] is True
    assert after["initialized"] is True
    assert after["status"] == "ready"
    assert after["active_intents"] == 0


def test_agent_initialize_rejects_bad_contract(make_client):
    with make_client() as client:
        data = client.post(
            "/api/agent/initialize",
            json={"deepseek_api_key": "test-key", "rpc_url": RPC_URL, "contract_address": "0x12"},
        ).json()
        status = client.get("/api/agent/status").json()

    assert data["success"] is False
    assert data["message"].startswith("Failed to initialize agent")
    assert status["initialized"] is False
