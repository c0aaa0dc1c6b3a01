from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr

from sagepay_server.core.signature import TransactionSignature
from sagepay_server.schemas.gateway import AcknowledgementStatus, TransactionStatus


# Sage Pay field name -> Transaction attribute
GATEWAY_FIELDS: Dict[str, str] = {
    "VPSProtocol": "vps_protocol",
    "Status": "status",
    "StatusDetail": "status_detail",
    "VPSTxId": "vps_tx_id",
    "SecurityKey": "security_key",
    "NextURL": "next_url",
    "VendorTxCode": "vendor_tx_code",
    "TxAuthNo": "tx_auth_no",
    "VendorName": "vendor_name",
    "AVSCV2": "avscv2",
    "AddressResult": "address_result",
    "PostCodeResult": "post_code_result",
    "CV2Result": "cv2_result",
    "GiftAid": "gift_aid",
    "CAVV": "cavv",
    "AddressStatus": "address_status",
    "PayerStatus": "payer_status",
    "CardType": "card_type",
    "Last4Digits": "last4_digits",
    "3DSecureStatus": "three_d_secure_status",
    "VPSSignature": "vps_signature",
}

NOT_FOUND_KEY = "not_found"
SECURITY_KEY_FIELD = "security_key"

LINE_SEPARATOR = "\r\n"


def parse_response_body(body: str) -> Dict[str, str]:
    """
    Parse a Sage Pay reply of CRLF separated ``Key=Value`` lines.

    Lines without an ``=`` are dropped. Values keep everything after the
    first ``=``, so URLs with query strings survive intact.
    """
    fields: Dict[str, str] = {}
    for line in (body or "").split(LINE_SEPARATOR):
        key, separator, value = line.partition("=")
        if not separator:
            continue
        fields[key] = value
    return fields


class Transaction(BaseModel):
    """One Sage Pay Server transaction as seen by the vendor."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    vendor_name: Optional[str] = None
    vps_protocol: Optional[str] = None
    status: Optional[str] = None
    status_detail: Optional[str] = None
    vps_tx_id: Optional[str] = None
    security_key: Optional[str] = None
    next_url: Optional[str] = None
    vendor_tx_code: Optional[str] = None
    tx_auth_no: Optional[str] = None
    avscv2: Optional[str] = None
    address_result: Optional[str] = None
    post_code_result: Optional[str] = None
    cv2_result: Optional[str] = None
    gift_aid: Optional[str] = None
    cavv: Optional[str] = None
    address_status: Optional[str] = None
    payer_status: Optional[str] = None
    card_type: Optional[str] = None
    last4_digits: Optional[str] = None
    three_d_secure_status: Optional[str] = None
    vps_signature: Optional[str] = None

    _not_found: bool = PrivateAttr(default=False)

    @classmethod
    def normalise_fields(cls, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Map Sage Pay and attribute names onto attributes, dropping unknown keys."""
        normalised: Dict[str, Any] = {}
        for key, value in fields.items():
            name = GATEWAY_FIELDS.get(key, key)
            if name in cls.model_fields:
                normalised[name] = value
        return normalised

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "Transaction":
        """
        Build a transaction from a mapping keyed by Sage Pay field names
        (``VPSTxId``) or attribute names (``vps_tx_id``).

        A truthy ``not_found`` entry produces the not-found sentinel.
        """
        if fields.get(NOT_FOUND_KEY):
            return cls.missing()
        return cls(**cls.normalise_fields(fields))

    @classmethod
    def missing(cls) -> "Transaction":
        """Sentinel returned when a lookup finds nothing usable."""
        transaction = cls()
        transaction._not_found = True
        return transaction

    @property
    def exists(self) -> bool:
        return not self._not_found

    def merge(self, fields: Mapping[str, Any]) -> "Transaction":
        """
        Apply the fields of a notification POST onto this transaction.

        The security key issued at registration is kept: it is the secret
        half of the signature and must never come from the callback.
        """
        for name, value in self.normalise_fields(fields).items():
            if name == SECURITY_KEY_FIELD:
                continue
            setattr(self, name, value)
        return self

    def signature_ok(self) -> bool:
        """Check if the notification data matches its VPSSignature."""
        return TransactionSignature.verify(self)

    def build_response(self, notification_url: str) -> str:
        """
        Acknowledgement body to return to Sage Pay for a notification.

        Checks run in order and the first failure wins.
        """
        if not self.exists:
            return self.format_response(AcknowledgementStatus.INVALID, notification_url, "Transaction not found")
        if not self.signature_ok():
            return self.format_response(AcknowledgementStatus.INVALID, notification_url, "Security check failed")
        if self.status == TransactionStatus.ERROR:
            return self.format_response(AcknowledgementStatus.ERROR, notification_url, "Sage Pay reported an error")
        if self.status in TransactionStatus.UNEXPECTED:
            return self.format_response(AcknowledgementStatus.INVALID, notification_url, "Unexpected status")
        if self.status not in TransactionStatus.COMPLETED:
            return self.format_response(
                AcknowledgementStatus.INVALID, notification_url, f"Invalid status: {self.status or ''}"
            )
        return self.format_response(AcknowledgementStatus.OK, notification_url)

    @staticmethod
    def format_response(
        status: Union[AcknowledgementStatus, str], notification_url: str, detail: Optional[str] = None
    ) -> str:
        status = status.value if isinstance(status, AcknowledgementStatus) else str(status)
        response = f"Status={status.upper()}{LINE_SEPARATOR}RedirectURL={notification_url}"
        if detail is not None:
            response += f"{LINE_SEPARATOR}StatusDetail={detail}"
        return response

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.model_dump() == other.model_dump() and self.exists == other.exists

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, vps_tx_id={self.vps_tx_id}, status='{self.status}', exists={self.exists})>"
