from .gateway import (
    AcknowledgementStatus,
    AuthorisationRequest,
    GatewayRequest,
    RegistrationRequest,
    TransactionStatus,
)

__all__ = [
    "AcknowledgementStatus",
    "AuthorisationRequest",
    "GatewayRequest",
    "RegistrationRequest",
    "TransactionStatus",
]
