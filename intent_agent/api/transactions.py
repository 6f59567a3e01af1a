import logging
import secrets

from fastapi import APIRouter, Depends

from ..state import ServiceState, get_service_state
from ..types import SignTransactionRequest, SignTransactionResponse

router = APIRouter(prefix="/api/transactions")

logger = logging.getLogger(__name__)


@router.post("/sign", response_model=SignTransactionResponse)
async def sign_transaction(
    payload: SignTransactionRequest,
    state: ServiceState = Depends(get_service_state),
) -> SignTransactionResponse:
    """
    Acknowledge a transaction without signing or broadcasting it.

    Transactions are signed client-side; the hash returned here is random
    and labeled ``simulated``.
    """
    if not await state.wallet_manager.is_connected():
        return SignTransactionResponse(
            success=False,
            message="Wallet not connected. Please connect your wallet first.",
        )

    tx = payload.transaction_data
    logger.info(f"Simulated signing for {payload.address}: {tx.description} (to={tx.to}, chain={tx.chain_id})")
    return SignTransactionResponse(
        success=True,
        transaction_hash="0x" + secrets.token_hex(32),
        message="Transaction signing simulated. In production, this would be signed by the user's wallet.",
        simulated=True,
    )
