import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..state import ServiceState, get_service_state
from ..types import CreateIntentRequest, IntentResponse, SignedIntentRequest

router = APIRouter(prefix="/api/intents")

logger = logging.getLogger(__name__)

AGENT_NOT_INITIALIZED = "Intent agent not initialized. Please initialize the agent first."


def _failed(message: str, ai_message: str) -> IntentResponse:
    return IntentResponse(
        intent_id=str(uuid.uuid4()),
        status="failed",
        message=message,
        ai_message=ai_message,
    )


@router.post("", response_model=IntentResponse)
async def create_intent(
    payload: CreateIntentRequest,
    state: ServiceState = Depends(get_service_state),
) -> IntentResponse:
    agent = state.agent
    if agent is None:
        return _failed(
            AGENT_NOT_INITIALIZED,
            "Please initialize the AI agent first by clicking 'Initialize Agent' in the settings.",
        )

    if payload.user_id is not None:
        logger.info(f"Intent received from user {payload.user_id}")
    result = await agent.process(payload.user_input, idempotency_key=payload.idempotency_key)
    return IntentResponse.from_result(result)


@router.post("/signed", response_model=IntentResponse)
async def create_signed_intent(
    payload: SignedIntentRequest,
    state: ServiceState = Depends(get_service_state),
) -> IntentResponse:
    if not await state.wallet_manager.is_connected():
        return _failed("No wallet connected", "Please connect your wallet first to execute transactions!")

    agent = state.agent
    if agent is None:
        return _failed(AGENT_NOT_INITIALIZED, "Please initialize the AI agent first.")

    logger.info(f"Signed intent from {payload.address}; signature is not verified")
    result = await agent.process_signed(
        payload.user_input,
        address=payload.address,
        chain_id=payload.chain_id,
        signature=payload.signature,
        idempotency_key=payload.idempotency_key,
    )
    return IntentResponse.from_result(result)


@router.get("", response_model=List[IntentResponse])
async def list_recent_intents(
    limit: int = Query(default=20, ge=1, le=500),
    state: ServiceState = Depends(get_service_state),
) -> List[IntentResponse]:
    """Most recent intents first; empty until an agent is initialized."""
    agent = state.agent
    if agent is None:
        return []
    return [IntentResponse.from_result(result) for result in agent.recent_intents(limit)]


@router.get("/{intent_id}", response_model=IntentResponse)
async def get_intent(intent_id: str, state: ServiceState = Depends(get_service_state)) -> IntentResponse:
    agent = state.agent
    result = agent.get_intent(intent_id) if agent is not None else None
    if result is None:
        raise HTTPException(status_code=404, detail=f"Intent {intent_id} not found")
    return IntentResponse.from_result(result)
