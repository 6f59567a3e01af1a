from fastapi import APIRouter, Depends

from .. import __version__
from ..state import ServiceState, get_service_state
from ..types import HealthResponse

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
async def health_check(state: ServiceState = Depends(get_service_state)) -> HealthResponse:
    """Liveness plus agent/wallet readiness"""
    return HealthResponse(
        status="healthy",
        version=__version__,
        agent_initialized=state.agent is not None,
        wallet_connected=await state.wallet_manager.is_connected(),
    )
