from .core.config import GatewayEnvironment, Settings, endpoints_for, settings
from .core.exceptions import ConfigurationError, SagePayError
from .core.gateway_client import GatewayClient
from .core.signature import TransactionSignature
from .models.transaction import Transaction, parse_response_body
from .repositories.transaction_repository import InMemoryTransactionRepository, TransactionRepository
from .services.notification_url import NotificationURLProvider, StaticNotificationURLProvider
from .services.transaction_service import TransactionService

__all__ = [
    "ConfigurationError",
    "GatewayClient",
    "GatewayEnvironment",
    "InMemoryTransactionRepository",
    "NotificationURLProvider",
    "SagePayError",
    "Settings",
    "StaticNotificationURLProvider",
    "Transaction",
    "TransactionRepository",
    "TransactionService",
    "TransactionSignature",
    "endpoints_for",
    "parse_response_body",
    "settings",
]
