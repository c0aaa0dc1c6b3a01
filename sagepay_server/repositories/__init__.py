from .transaction_repository import InMemoryTransactionRepository, TransactionRepository

__all__ = [
    "InMemoryTransactionRepository",
    "TransactionRepository",
]
