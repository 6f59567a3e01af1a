import logging

from fastapi import APIRouter, Depends

from ..config import settings
from ..core.errors import AgentError
from ..state import ServiceState, build_agent, get_service_state
from ..types import AgentInitializeResponse, AgentStatusResponse, InitializeAgentRequest

router = APIRouter(prefix="/api/agent")

logger = logging.getLogger(__name__)


@router.post("/initialize", response_model=AgentInitializeResponse)
async def initialize_agent(
    payload: InitializeAgentRequest,
    state: ServiceState = Depends(get_service_state),
) -> AgentInitializeResponse:
    """Create (or replace) the read-only intent agent."""
    api_key = payload.deepseek_api_key or settings.deepseek_api_key
    rpc_url = payload.rpc_url or settings.default_rpc_url
    contract_address = payload.contract_address or settings.contract_address

    logger.info(f"Initializing intent agent against {rpc_url}, contract {contract_address or '<unset>'}")

    try:
        agent = build_agent(api_key, rpc_url, contract_address, state.wallet_manager)
    except (AgentError, ValueError) as e:
        logger.error(f"Failed to initialize agent: {e}")
        return AgentInitializeResponse(success=False, message=f"Failed to initialize agent: {e}")

    await state.set_agent(agent)
    return AgentInitializeResponse(
        success=True,
        message="Intent agent initialized successfully (awaiting wallet connection)",
        agent_name=agent.name,
        read_only=agent.read_only,
        wallet_required=True,
    )


@router.get("/status", response_model=AgentStatusResponse)
async def agent_status(state: ServiceState = Depends(get_service_state)) -> AgentStatusResponse:
    wallet_connected = await state.wallet_manager.is_connected()
    agent = state.agent
    if agent is None:
        return AgentStatusResponse(
            initialized=False,
            status="uninitialized",
            wallet_connected=wallet_connected,
            message="Agent not initialized",
        )

    return AgentStatusResponse(
        initialized=True,
        status="ready",
        wallet_connected=wallet_connected,
        agent_name=agent.name,
        active_intents=len(agent.ledger),
        read_only=agent.read_only,
    )
