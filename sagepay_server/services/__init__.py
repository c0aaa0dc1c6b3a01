from .notification_url import NotificationURLProvider, StaticNotificationURLProvider
from .transaction_service import TransactionService

__all__ = [
    "NotificationURLProvider",
    "StaticNotificationURLProvider",
    "TransactionService",
]
