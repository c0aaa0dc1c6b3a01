from typing import Any, Dict, Mapping, Union

from sagepay_server.core.exceptions import ConfigurationError
from sagepay_server.core.logging import get_logger
from sagepay_server.models.transaction import Transaction, parse_response_body
from sagepay_server.repositories.transaction_repository import TransactionRepository
from sagepay_server.schemas.gateway import GatewayRequest
from .notification_url import NotificationURLProvider

RequestData = Union[GatewayRequest, Mapping[str, Any]]


class TransactionService:
    """Registers, authorises and acknowledges Sage Pay Server transactions."""

    def __init__(
        self,
        gateway,
        repository: TransactionRepository,
        notification_urls: NotificationURLProvider,
    ):
        """
        Args:
            gateway: Transport exposing raw_register(data) and raw_authorise(data),
                normally a GatewayClient
            repository: Lookup for transactions registered earlier
            notification_urls: Source of the RedirectURL sent in acknowledgements

        Raises:
            ConfigurationError: If any collaborator is missing
        """
        if gateway is None:
            raise ConfigurationError("TransactionService needs a gateway transport")
        if repository is None:
            raise ConfigurationError("TransactionService needs a transaction repository")
        if notification_urls is None:
            raise ConfigurationError("TransactionService needs a notification URL provider")

        self.gateway = gateway
        self.repository = repository
        self.notification_urls = notification_urls
        self.logger = get_logger(self.__class__.__name__)

    def register_transaction(self, request_data: RequestData) -> Transaction:
        """Register a new transaction with Sage Pay."""
        data = self._form_data(request_data)
        response = self.gateway.raw_register(data)
        transaction = self._build_transaction(response, data)
        self.logger.info(
            "Transaction registered",
            vendor_tx_code=transaction.id,
            vps_tx_id=transaction.vps_tx_id,
            status=transaction.status,
        )
        return transaction

    def authorise_transaction(self, request_data: RequestData) -> Transaction:
        """Authorise a previously AUTHENTICATED transaction."""
        data = self._form_data(request_data)
        response = self.gateway.raw_authorise(data)
        transaction = self._build_transaction(response, data)
        self.logger.info(
            "Transaction authorised",
            vendor_tx_code=transaction.id,
            vps_tx_id=transaction.vps_tx_id,
            status=transaction.status,
        )
        return transaction

    def find(self, vendor_tx_code: str, vps_tx_id: str) -> Transaction:
        """
        Find a stored transaction.

        The VPSTxId posted by Sage Pay has to match the stored one, otherwise
        the not-found sentinel is returned.
        """
        transaction = self.repository.get(vendor_tx_code)
        if transaction is None:
            self.logger.warning("Transaction not found", vendor_tx_code=vendor_tx_code)
            return Transaction.missing()
        if transaction.vps_tx_id != vps_tx_id:
            self.logger.warning(
                "VPSTxId mismatch",
                vendor_tx_code=vendor_tx_code,
                vps_tx_id=vps_tx_id,
            )
            return Transaction.missing()
        return transaction

    def acknowledge(self, transaction: Transaction) -> str:
        """Return the body Sage Pay expects in reply to its notification."""
        notification_url = self.notification_urls.notification_url(transaction)
        return transaction.build_response(notification_url)

    def handle_notification(self, fields: Mapping[str, Any]) -> str:
        """
        Process a notification POST from Sage Pay.

        Merges the posted fields into a copy of the stored transaction and
        builds the acknowledgement from it. The copy is stored only when its
        signature checks out, so a rejected notification leaves the stored
        record untouched. Problems are reported to Sage Pay in the
        acknowledgement body rather than raised.
        """
        transaction = self.find(fields.get("VendorTxCode"), fields.get("VPSTxId"))
        if transaction.exists:
            transaction = transaction.model_copy().merge(fields)
            if transaction.signature_ok():
                self.repository.save(transaction)
            else:
                self.logger.warning(
                    "Notification failed the security check, not stored",
                    vendor_tx_code=fields.get("VendorTxCode"),
                )

        response = self.acknowledge(transaction)
        self.logger.info(
            "Notification acknowledged",
            vendor_tx_code=fields.get("VendorTxCode"),
            status=fields.get("Status"),
            acknowledgement=response.split("\r\n", 1)[0],
        )
        return response

    @staticmethod
    def _form_data(request_data: RequestData) -> Dict[str, Any]:
        if isinstance(request_data, GatewayRequest):
            return request_data.to_form_data()
        return dict(request_data)

    @staticmethod
    def _build_transaction(response: str, data: Mapping[str, Any]) -> Transaction:
        fields: Dict[str, Any] = parse_response_body(response)
        fields.update({"id": data.get("VendorTxCode"), "vendor_name": data.get("Vendor")})
        return Transaction.from_fields(fields)
