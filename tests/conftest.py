"""
Pytest configuration and fixtures for Sage Pay Server tests.
"""
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from sagepay_server.core.signature import TransactionSignature
from sagepay_server.models.transaction import Transaction
from sagepay_server.repositories.transaction_repository import InMemoryTransactionRepository
from sagepay_server.services.notification_url import StaticNotificationURLProvider
from sagepay_server.services.transaction_service import TransactionService

VPS_TX_ID = "{F2A9E367-AC15-4F5F-AB4C-D74B5A0EE8CF}"
SECURITY_KEY = "YK4N4LO9PT"
NOTIFICATION_URL = "https://shop.example.com/sagepay/complete"

REGISTER_RESPONSE = (
    "VPSProtocol=2.23\r\n"
    "Status=OK\r\n"
    "StatusDetail=Server transaction registered successfully.\r\n"
    f"VPSTxId={VPS_TX_ID}\r\n"
    f"SecurityKey={SECURITY_KEY}\r\n"
    f"NextURL=https://test.sagepay.com/Simulator/VSPServerPaymentPage.asp?SageTransactionID={VPS_TX_ID}"
)

AUTHORISE_RESPONSE = (
    "VPSProtocol=2.23\r\n"
    "Status=OK\r\n"
    "StatusDetail=Server transaction authorised successfully.\r\n"
    f"VPSTxId={VPS_TX_ID}\r\n"
    f"SecurityKey={SECURITY_KEY}\r\n"
)


def sign_notification(stored: Transaction, fields: Dict[str, Any]) -> str:
    """Signature Sage Pay would post for these notification fields."""
    return TransactionSignature.generate(stored.model_copy().merge(fields))


@pytest.fixture
def registration_data():
    """Form fields the vendor posts when registering."""
    return {
        "VPSProtocol": "2.23",
        "TxType": "PAYMENT",
        "Vendor": "acme",
        "VendorTxCode": "acme-1001",
        "Amount": "12.50",
        "Currency": "GBP",
        "Description": "Two tickets",
        "NotificationURL": "https://shop.example.com/v1/notifications",
    }


@pytest.fixture
def registered_transaction():
    """Transaction as stored after a successful registration."""
    return Transaction.from_fields({
        "vps_protocol": "2.23",
        "status": "OK",
        "status_detail": "Server transaction registered successfully.",
        "vps_tx_id": VPS_TX_ID,
        "security_key": SECURITY_KEY,
        "next_url": f"https://test.sagepay.com/Simulator/VSPServerPaymentPage.asp?SageTransactionID={VPS_TX_ID}",
        "id": "acme-1001",
        "vendor_name": "acme",
    })


@pytest.fixture
def notification_fields(registered_transaction):
    """Signed notification POST for the registered transaction."""
    fields = {
        "VPSProtocol": "2.23",
        "TxType": "PAYMENT",
        "VendorTxCode": "acme-1001",
        "VPSTxId": VPS_TX_ID,
        "Status": "OK",
        "StatusDetail": "0000 : The Authorisation was Successful.",
        "TxAuthNo": "7349",
        "AVSCV2": "ALL MATCH",
        "AddressResult": "MATCHED",
        "PostCodeResult": "MATCHED",
        "CV2Result": "MATCHED",
        "GiftAid": "0",
        "3DSecureStatus": "OK",
        "CAVV": "AAABARR5kwAAAAAAAAAAAAAAAAA=",
        "CardType": "VISA",
        "Last4Digits": "0006",
    }
    fields["VPSSignature"] = sign_notification(registered_transaction, fields)
    return fields


@pytest.fixture
def mock_gateway():
    """Mock gateway transport."""
    gateway = MagicMock()
    gateway.raw_register = MagicMock(return_value=REGISTER_RESPONSE)
    gateway.raw_authorise = MagicMock(return_value=AUTHORISE_RESPONSE)
    return gateway


@pytest.fixture
def repository():
    return InMemoryTransactionRepository()


@pytest.fixture
def notification_urls():
    return StaticNotificationURLProvider(NOTIFICATION_URL)


@pytest.fixture
def service(mock_gateway, repository, notification_urls):
    """Transaction service with a mocked gateway and in-memory storage."""
    return TransactionService(
        gateway=mock_gateway,
        repository=repository,
        notification_urls=notification_urls,
    )
