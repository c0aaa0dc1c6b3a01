from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class GatewayEnvironment(str, Enum):
    """Sage Pay deployments a vendor can talk to."""

    SIMULATOR = "simulator"
    TEST = "test"
    LIVE = "live"


class GatewayAction(str, Enum):
    REGISTER = "register"
    AUTHORISE = "authorise"


class GatewayEndpoints(BaseModel):
    """Base URL plus the per-action suffix for one environment."""

    base_url: str
    register_path: str
    authorise_path: str

    def url_for(self, action: Union[GatewayAction, str]) -> str:
        action = GatewayAction(action)
        if action is GatewayAction.REGISTER:
            return f"{self.base_url}{self.register_path}"
        return f"{self.base_url}{self.authorise_path}"


GATEWAY_ENDPOINTS = {
    GatewayEnvironment.SIMULATOR: GatewayEndpoints(
        base_url="https://test.sagepay.com/simulator/VSPServerGateway.asp?Service=",
        register_path="VendorRegisterTx",
        authorise_path="VendorAuthoriseTx",
    ),
    GatewayEnvironment.TEST: GatewayEndpoints(
        base_url="https://test.sagepay.com/gateway/service/",
        register_path="vspserver-register.vsp",
        authorise_path="vspserver-authorise.vsp",
    ),
    GatewayEnvironment.LIVE: GatewayEndpoints(
        base_url="https://live.sagepay.com/gateway/service/",
        register_path="vspserver-register.vsp",
        authorise_path="vspserver-authorise.vsp",
    ),
}


def endpoints_for(environment: Union[GatewayEnvironment, str]) -> GatewayEndpoints:
    """
    Look up the endpoint table for a gateway environment.

    Raises:
        ConfigurationError: If the environment name is not one of
            simulator, test or live.
    """
    try:
        return GATEWAY_ENDPOINTS[GatewayEnvironment(environment)]
    except ValueError:
        allowed = [env.value for env in GatewayEnvironment]
        raise ConfigurationError(
            f"Unknown Sage Pay environment: {environment!r}",
            details={"allowed": allowed},
        )


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Sage Pay Server"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Sage Pay
    SAGE_PAY_SERVER: GatewayEnvironment = GatewayEnvironment.SIMULATOR
    SAGE_PAY_VENDOR: str = ""
    VPS_PROTOCOL: str = "2.23"
    GATEWAY_TIMEOUT_SECONDS: int = Field(default=30, ge=1)

    # Where Sage Pay should send the shopper after the notification is acknowledged
    NOTIFICATION_URL: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of: {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v.lower() not in ("json", "console"):
            raise ValueError("Log format must be 'json' or 'console'")
        return v.lower()

    @property
    def gateway_endpoints(self) -> GatewayEndpoints:
        return endpoints_for(self.SAGE_PAY_SERVER)


# Global settings instance
settings = Settings()
