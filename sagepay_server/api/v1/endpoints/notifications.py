from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from sagepay_server.core.logging import get_logger
from sagepay_server.services.transaction_service import TransactionService

router = APIRouter()
logger = get_logger(__name__)


def get_transaction_service(request: Request) -> TransactionService:
    return request.app.state.transaction_service


@router.post("", response_class=PlainTextResponse)
async def receive_notification(
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Receive the notification POST Sage Pay sends once the shopper has paid.

    The body is form encoded. Sage Pay reads the acknowledgement from the
    plain text response, so problems (unknown transaction, bad signature,
    unexpected status) are reported in the body with a 200 status.
    """
    body = await request.body()
    # Undecodable bytes become U+FFFD; the signature check rejects them.
    fields = dict(parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True))

    logger.info(
        "Sage Pay notification received",
        vendor_tx_code=fields.get("VendorTxCode"),
        vps_tx_id=fields.get("VPSTxId"),
        status=fields.get("Status"),
    )

    # Repository implementations may block
    acknowledgement = await run_in_threadpool(service.handle_notification, fields)
    return PlainTextResponse(acknowledgement)
