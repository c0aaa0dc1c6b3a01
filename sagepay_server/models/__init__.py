from .transaction import GATEWAY_FIELDS, Transaction, parse_response_body

__all__ = [
    "GATEWAY_FIELDS",
    "Transaction",
    "parse_response_body",
]
