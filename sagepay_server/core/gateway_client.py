from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .config import GatewayAction, GatewayEnvironment, endpoints_for, settings
from .logging import get_logger

logger = get_logger(__name__)


class GatewayClient:
    """Blocking HTTP transport for the Sage Pay Server protocol."""

    def __init__(
        self,
        environment: Union[GatewayEnvironment, str] = GatewayEnvironment.SIMULATOR,
        timeout: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize gateway client.

        Args:
            environment: Sage Pay deployment to post to (simulator, test, live)
            timeout: Request timeout in seconds, GATEWAY_TIMEOUT_SECONDS by default
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests

        Raises:
            ConfigurationError: If the environment is unknown
        """
        self.endpoints = endpoints_for(environment)
        self.environment = GatewayEnvironment(environment)
        self.timeout = timeout if timeout is not None else settings.GATEWAY_TIMEOUT_SECONDS
        self._client = httpx.Client(
            timeout=self.timeout,
            transport=transport,
            headers={"User-Agent": f"{settings.APP_NAME}/{settings.VERSION}"},
        )

    def url_for(self, action: Union[GatewayAction, str]) -> str:
        return self.endpoints.url_for(action)

    def raw_register(self, data: Optional[Mapping[str, Any]] = None) -> str:
        """POST a registration and return Sage Pay's raw reply body."""
        return self._post(GatewayAction.REGISTER, data)

    def raw_authorise(self, data: Optional[Mapping[str, Any]] = None) -> str:
        """POST an authorisation and return Sage Pay's raw reply body."""
        return self._post(GatewayAction.AUTHORISE, data)

    def _post(self, action: GatewayAction, data: Optional[Mapping[str, Any]]) -> str:
        """
        Send one form-encoded POST.

        Raises:
            httpx.HTTPStatusError: If Sage Pay answers with a 4xx/5xx status
            httpx.HTTPError: On connection failures and timeouts
        """
        url = self.url_for(action)
        form: Dict[str, Any] = dict(data or {})

        logger.info(
            "Posting to Sage Pay",
            action=action.value,
            url=url,
            environment=self.environment.value,
            vendor_tx_code=form.get("VendorTxCode"),
        )

        response = self._client.post(url, data=form)

        logger.info(
            "Sage Pay responded",
            action=action.value,
            url=url,
            status_code=response.status_code,
        )

        if response.status_code >= 400:
            logger.warning(
                "Sage Pay request failed",
                action=action.value,
                url=url,
                status_code=response.status_code,
                response_text=response.text[:500],
            )
            response.raise_for_status()

        return response.text

    def close(self):
        self._client.close()

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @classmethod
    def from_settings(cls, config=None, transport: Optional[httpx.BaseTransport] = None) -> "GatewayClient":
        config = config or settings
        return cls(
            environment=config.SAGE_PAY_SERVER,
            timeout=config.GATEWAY_TIMEOUT_SECONDS,
            transport=transport,
        )
