import hashlib
import hmac
from typing import TYPE_CHECKING

from .logging import get_logger

if TYPE_CHECKING:
    from sagepay_server.models.transaction import Transaction

logger = get_logger(__name__)


# Order in which Sage Pay concatenates notification fields before hashing
SIGNATURE_FIELDS = (
    "vps_tx_id",
    "vendor_tx_code",
    "status",
    "tx_auth_no",
    "vendor_name",
    "avscv2",
    "security_key",
    "address_result",
    "post_code_result",
    "cv2_result",
    "gift_aid",
    "three_d_secure_status",
    "cavv",
    "address_status",
    "payer_status",
    "card_type",
    "last4_digits",
)


class TransactionSignature:
    """VPSSignature verification for Sage Pay notification posts."""

    @staticmethod
    def signed_payload(transaction: "Transaction") -> str:
        """Concatenate the signed fields, treating missing values as empty."""
        return "".join(getattr(transaction, name) or "" for name in SIGNATURE_FIELDS)

    @staticmethod
    def generate(transaction: "Transaction") -> str:
        """
        Compute the signature Sage Pay would send for this transaction.

        Sage Pay signs notifications with an upper-cased hex MD5 digest;
        the algorithm is fixed by the protocol.

        Returns:
            32 character upper-case hex digest
        """
        payload = TransactionSignature.signed_payload(transaction)
        return hashlib.md5(payload.encode("utf-8")).hexdigest().upper()

    @staticmethod
    def verify(transaction: "Transaction") -> bool:
        """
        Check the transaction's VPSSignature against the recomputed digest.

        Returns:
            True if the signature is present and matches, False otherwise
        """
        received = transaction.vps_signature
        if not received:
            logger.warning("Notification has no VPSSignature", vendor_tx_code=transaction.id)
            return False

        expected = TransactionSignature.generate(transaction)
        if not hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8")):
            logger.warning(
                "VPSSignature verification failed",
                vendor_tx_code=transaction.id,
                vps_tx_id=transaction.vps_tx_id,
            )
            return False

        return True
