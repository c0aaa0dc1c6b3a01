from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from sagepay_server.api.v1.router import api_router
from sagepay_server.core.config import Settings, settings
from sagepay_server.core.exceptions import ConfigurationError
from sagepay_server.core.gateway_client import GatewayClient
from sagepay_server.core.logging import get_logger, setup_logging
from sagepay_server.repositories.transaction_repository import InMemoryTransactionRepository
from sagepay_server.services.notification_url import StaticNotificationURLProvider
from sagepay_server.services.transaction_service import TransactionService

logger = get_logger(__name__)


def build_service(config: Settings) -> TransactionService:
    """
    Wire a TransactionService from settings.

    Raises:
        ConfigurationError: If NOTIFICATION_URL is not configured
    """
    if not config.NOTIFICATION_URL:
        raise ConfigurationError("NOTIFICATION_URL must be set to serve Sage Pay notifications")
    return TransactionService(
        gateway=GatewayClient.from_settings(config),
        repository=InMemoryTransactionRepository(),
        notification_urls=StaticNotificationURLProvider(config.NOTIFICATION_URL),
    )


def create_app(service: Optional[TransactionService] = None, config: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application that receives Sage Pay notifications."""
    config = config or settings
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)
    service = service or build_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Sage Pay Server startup completed",
            sage_pay_server=config.SAGE_PAY_SERVER.value,
            environment=config.ENVIRONMENT,
        )
        yield
        close = getattr(service.gateway, "close", None)
        if close is not None:
            close()
        logger.info("Sage Pay Server shutdown completed")

    app = FastAPI(
        title=config.APP_NAME,
        description="Receives Sage Pay Server notifications and acknowledges them.",
        version=config.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.transaction_service = service
    app.include_router(api_router, prefix="/v1")
    return app
