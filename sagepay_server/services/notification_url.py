from abc import ABC, abstractmethod

from sagepay_server.core.exceptions import ConfigurationError
from sagepay_server.models.transaction import Transaction


class NotificationURLProvider(ABC):
    """Decides where Sage Pay redirects the shopper after a notification."""

    @abstractmethod
    def notification_url(self, transaction: Transaction) -> str:
        """RedirectURL to send back in the acknowledgement for this transaction."""


class StaticNotificationURLProvider(NotificationURLProvider):
    """Same redirect URL for every transaction."""

    def __init__(self, url: str):
        if not url:
            raise ConfigurationError("A notification URL is required")
        self.url = url

    def notification_url(self, transaction: Transaction) -> str:
        return self.url
