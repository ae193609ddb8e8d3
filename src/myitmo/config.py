"""Client configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ItmoConfig(BaseSettings):
    """ITMO client configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Identity provider (Keycloak realm) and OAuth client registration
    itmo_client_id: str = Field(
        default="student-personal-cabinet",
        description="OAuth client id registered for my.itmo.ru",
    )
    itmo_redirect_uri: str = Field(
        default="https://my.itmo.ru/login/callback",
        description="Redirect URI registered for the client",
    )
    itmo_provider_url: str = Field(
        default="https://id.itmo.ru/auth/realms/itmo",
        description="Keycloak realm base URL",
    )
    itmo_auth_state: str = Field(
        default="im_not_a_browser",
        description="Opaque state value sent with the authorization request",
    )

    # Schedule API
    itmo_api_base_url: str = Field(
        default="https://my.itmo.ru/api",
        description="my.itmo.ru REST API base URL",
    )

    # Credentials (used by scripts only)
    itmo_user: str = Field(
        default="",
        description="ITMO ID username for scripted login",
    )
    itmo_pass: str = Field(
        default="",
        description="ITMO ID password for scripted login",
    )

    # HTTP settings
    request_timeout: float | None = Field(
        default=30.0,
        description="Per-request timeout in seconds (None disables it)",
    )
    auth_page_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts for the authorization page GET on network errors",
    )
    auth_page_retry_wait: float = Field(
        default=2.0,
        ge=0,
        description="Seconds to wait between authorization page attempts",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def auth_url(self) -> str:
        return f"{self.itmo_provider_url}/protocol/openid-connect/auth"

    @property
    def token_url(self) -> str:
        return f"{self.itmo_provider_url}/protocol/openid-connect/token"


# Singleton pattern
_config: ItmoConfig | None = None


def get_config() -> ItmoConfig:
    """Get the client configuration singleton.

    Returns:
        ItmoConfig: Client configuration instance
    """
    global _config
    if _config is None:
        _config = ItmoConfig()
    return _config
