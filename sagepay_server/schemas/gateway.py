from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AcknowledgementStatus(str, Enum):
    """Status values Sage Pay accepts in a notification acknowledgement."""

    OK = "OK"
    INVALID = "INVALID"
    ERROR = "ERROR"


class TransactionStatus:
    """Status strings Sage Pay posts back in a notification."""

    OK = "OK"
    NOTAUTHED = "NOTAUTHED"
    ABORT = "ABORT"
    REJECTED = "REJECTED"
    AUTHENTICATED = "AUTHENTICATED"
    REGISTERED = "REGISTERED"
    ERROR = "ERROR"

    # Final outcomes a vendor should accept
    COMPLETED = frozenset({OK, NOTAUTHED, ABORT, REJECTED})
    # Legal for the protocol, but never expected on a PAYMENT notification
    UNEXPECTED = frozenset({AUTHENTICATED, REGISTERED})


class GatewayRequest(BaseModel):
    """Common behaviour for requests posted to Sage Pay."""

    model_config = ConfigDict(populate_by_name=True)

    def to_form_data(self) -> Dict[str, Any]:
        """Form fields keyed by Sage Pay's names, without unset values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class RegistrationRequest(GatewayRequest):
    """Schema for a Server transaction registration (PAYMENT, DEFERRED, AUTHENTICATE)."""

    vps_protocol: str = Field(default="2.23", alias="VPSProtocol")
    tx_type: str = Field(default="PAYMENT", alias="TxType", pattern="^(PAYMENT|DEFERRED|AUTHENTICATE)$")
    vendor: str = Field(..., alias="Vendor", min_length=1)
    vendor_tx_code: str = Field(..., alias="VendorTxCode", min_length=1, max_length=40)
    amount: str = Field(..., alias="Amount", description="Amount with two decimal places, e.g. 12.50")
    currency: str = Field(default="GBP", alias="Currency", min_length=3, max_length=3)
    description: str = Field(..., alias="Description", max_length=100)
    notification_url: str = Field(..., alias="NotificationURL")

    billing_surname: Optional[str] = Field(None, alias="BillingSurname")
    billing_firstnames: Optional[str] = Field(None, alias="BillingFirstnames")
    billing_address1: Optional[str] = Field(None, alias="BillingAddress1")
    billing_city: Optional[str] = Field(None, alias="BillingCity")
    billing_post_code: Optional[str] = Field(None, alias="BillingPostCode")
    billing_country: Optional[str] = Field(None, alias="BillingCountry")
    delivery_surname: Optional[str] = Field(None, alias="DeliverySurname")
    delivery_firstnames: Optional[str] = Field(None, alias="DeliveryFirstnames")
    delivery_address1: Optional[str] = Field(None, alias="DeliveryAddress1")
    delivery_city: Optional[str] = Field(None, alias="DeliveryCity")
    delivery_post_code: Optional[str] = Field(None, alias="DeliveryPostCode")
    delivery_country: Optional[str] = Field(None, alias="DeliveryCountry")
    customer_email: Optional[str] = Field(None, alias="CustomerEMail")
    apply_avscv2: Optional[int] = Field(None, alias="ApplyAVSCV2", ge=0, le=3)
    apply_3d_secure: Optional[int] = Field(None, alias="Apply3DSecure", ge=0, le=3)


class AuthorisationRequest(GatewayRequest):
    """Schema for authorising a previously AUTHENTICATED transaction."""

    vps_protocol: str = Field(default="2.23", alias="VPSProtocol")
    tx_type: str = Field(default="AUTHORISE", alias="TxType")
    vendor: str = Field(..., alias="Vendor", min_length=1)
    vendor_tx_code: str = Field(..., alias="VendorTxCode", min_length=1, max_length=40)
    amount: str = Field(..., alias="Amount")
    description: str = Field(..., alias="Description", max_length=100)
    related_vps_tx_id: str = Field(..., alias="RelatedVPSTxId")
    related_vendor_tx_code: str = Field(..., alias="RelatedVendorTxCode")
    related_security_key: str = Field(..., alias="RelatedSecurityKey")
    related_tx_auth_no: Optional[str] = Field(None, alias="RelatedTxAuthNo")
    apply_avscv2: Optional[int] = Field(None, alias="ApplyAVSCV2", ge=0, le=3)
    apply_cv2: Optional[int] = Field(None, alias="ApplyCV2", ge=0, le=3)
