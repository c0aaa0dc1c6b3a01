from abc import ABC, abstractmethod
from typing import Dict, Optional

from sagepay_server.models.transaction import Transaction


class TransactionRepository(ABC):
    """
    Storage the embedding application provides for registered transactions.

    Sage Pay posts its notification to the vendor some time after
    registration; the security key returned at registration has to be
    kept somewhere until then.
    """

    @abstractmethod
    def get(self, vendor_tx_code: str) -> Optional[Transaction]:
        """Return the stored transaction for a VendorTxCode, or None."""

    def save(self, transaction: Transaction) -> Transaction:
        """Persist a transaction after a verified notification has been merged into it."""
        raise NotImplementedError(
            f"{self.__class__.__name__}.save needs to be defined to store notifications"
        )


class InMemoryTransactionRepository(TransactionRepository):
    """Dict-backed repository keyed by VendorTxCode."""

    def __init__(self):
        self._transactions: Dict[str, Transaction] = {}

    def get(self, vendor_tx_code: str) -> Optional[Transaction]:
        return self._transactions.get(vendor_tx_code)

    def save(self, transaction: Transaction) -> Transaction:
        if not transaction.id:
            raise ValueError("Cannot store a transaction without a VendorTxCode")
        self._transactions[transaction.id] = transaction
        return transaction

    def __len__(self) -> int:
        return len(self._transactions)
