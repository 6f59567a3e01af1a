import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import agent, health, intents, transactions, wallet
from .config import settings
from .core.errors import AgentError
from .core.wallet import WalletSessionManager
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .state import ServiceState, build_agent
from .types import HelloRequest, HelloResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "Teemah AI Backend"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Tests may pre-populate the state with fakes
    service = getattr(app.state, "service", None)
    if service is None:
        service = ServiceState(
            WalletSessionManager(
                settings.default_rpc_url,
                request_timeout=settings.chain_request_timeout_seconds,
            )
        )
        app.state.service = service

    if service.agent is None and settings.can_auto_initialize:
        try:
            await service.set_agent(build_agent(
                settings.deepseek_api_key,
                settings.default_rpc_url,
                settings.contract_address,
                service.wallet_manager,
            ))
            logger.info("Intent agent initialized from configuration")
        except (AgentError, ValueError) as e:
            logger.error(f"Auto-initialization failed: {e}")

    logger.info(f"{SERVICE_NAME} v{__version__} started")
    try:
        yield
    finally:
        await service.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title=SERVICE_NAME,
        description="Natural-language intents for a token launchpad",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    # Wildcard origins cannot be combined with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(agent.router, tags=["Agent"])
    app.include_router(wallet.router, tags=["Wallet"])
    app.include_router(intents.router, tags=["Intents"])
    app.include_router(transactions.router, tags=["Transactions"])

    @app.get("/")
    async def root():
        """Root endpoint with basic info"""
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "message": f"{SERVICE_NAME} Server v{__version__}",
            "docs": "/docs",
            "health": "/api/health",
        }

    @app.post("/api/hello", response_model=HelloResponse)
    async def hello(payload: HelloRequest) -> HelloResponse:
        return HelloResponse(
            message=f"Hello {payload.name} from {SERVICE_NAME}!",
            timestamp=datetime.now().astimezone().isoformat(),
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "intent_agent.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
