"""my.itmo.ru client: server-side PKCE login and personal schedule fetch."""

from src.myitmo.auth import TokenAcquirer, acquire_token
from src.myitmo.errors import (
    ApiError,
    AuthEndpointError,
    AuthFlowError,
    FormNotFoundError,
    InvalidCredentialsError,
    ItmoClientError,
    MalformedTokenResponseError,
    TokenEndpointError,
)
from src.myitmo.schedule import ScheduleFetcher, fetch_lessons

__all__ = [
    "TokenAcquirer",
    "acquire_token",
    "ScheduleFetcher",
    "fetch_lessons",
    "ItmoClientError",
    "AuthFlowError",
    "AuthEndpointError",
    "FormNotFoundError",
    "InvalidCredentialsError",
    "TokenEndpointError",
    "MalformedTokenResponseError",
    "ApiError",
]
