import logging

from fastapi import APIRouter, Depends

from ..core.errors import AgentError, NotConnectedError
from ..core.wallet import WalletType
from ..state import ServiceState, get_service_state
from ..types import (
    SignMessageRequest,
    SignMessageResponse,
    WalletBalanceResponse,
    WalletConnectRequest,
    WalletConnectResponse,
    WalletStatusResponse,
)

router = APIRouter(prefix="/api/wallet")

logger = logging.getLogger(__name__)


@router.post("/connect", response_model=WalletConnectResponse)
async def connect_wallet(
    payload: WalletConnectRequest,
    state: ServiceState = Depends(get_service_state),
) -> WalletConnectResponse:
    wallet_type = WalletType.parse(payload.wallet_type)
    try:
        session = await state.wallet_manager.connect(payload.address, payload.chain_id, wallet_type)
    except AgentError as e:
        logger.warning(f"Failed to connect wallet: {e}")
        return WalletConnectResponse(success=False, message=f"Failed to connect wallet: {e}")

    return WalletConnectResponse(
        success=True,
        message="Wallet connected successfully",
        address=session.address,
        chain_id=session.chain_id,
    )


@router.post("/disconnect", response_model=WalletConnectResponse)
async def disconnect_wallet(state: ServiceState = Depends(get_service_state)) -> WalletConnectResponse:
    await state.wallet_manager.disconnect()
    return WalletConnectResponse(success=True, message="Wallet disconnected successfully")


@router.get("/status", response_model=WalletStatusResponse)
async def wallet_status(state: ServiceState = Depends(get_service_state)) -> WalletStatusResponse:
    session = await state.wallet_manager.get_session()
    if session is None:
        return WalletStatusResponse(connected=False)

    balance = balance_eth = None
    try:
        wallet_balance = await state.wallet_manager.get_balance()
        balance, balance_eth = wallet_balance.wei, wallet_balance.eth
    except AgentError as e:
        logger.warning(f"Balance unavailable for {session.address}: {e}")

    return WalletStatusResponse(
        connected=True,
        address=session.address,
        chain_id=session.chain_id,
        balance=balance,
        balance_eth=balance_eth,
        wallet_type=session.wallet_type.display_name,
        connected_at=session.connected_at.isoformat(),
    )


@router.get("/balance", response_model=WalletBalanceResponse)
async def wallet_balance(state: ServiceState = Depends(get_service_state)) -> WalletBalanceResponse:
    try:
        balance = await state.wallet_manager.get_balance()
    except AgentError as e:
        return WalletBalanceResponse(success=False, message=f"Failed to get balance: {e}")
    return WalletBalanceResponse(success=True, balance=balance.wei, balance_eth=balance.eth)


@router.post("/sign-message", response_model=SignMessageResponse)
async def sign_message(
    payload: SignMessageRequest,
    state: ServiceState = Depends(get_service_state),
) -> SignMessageResponse:
    if not payload.message:
        return SignMessageResponse(success=False, message="No message provided")

    try:
        signed = await state.wallet_manager.sign_message(payload.message)
    except NotConnectedError as e:
        return SignMessageResponse(success=False, message=f"Failed to sign message: {e}")

    return SignMessageResponse(
        success=True,
        message="Message signed successfully",
        signature=str(signed["signature"]),
        authoritative=False,
    )
