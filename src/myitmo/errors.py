"""Error hierarchy for the ITMO login flow and schedule API.

Every failure is raised to the caller immediately. The login flow is not
resumable: a fresh PKCE pair and authorization code are needed per attempt,
so callers that want to retry must start over with acquire_token().

Example usage:
    try:
        token = acquire_token(username, password)
    except InvalidCredentialsError:
        ...  # ask the user again
    except AuthFlowError as e:
        log.error("login_failed", error=str(e))
"""


class ItmoClientError(Exception):
    """Base exception for all ITMO client errors."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthFlowError(ItmoClientError):
    """Any failure while obtaining an access token."""

    pass


class AuthEndpointError(AuthFlowError):
    """Authorization endpoint returned a bad status or no redirect data.

    Examples: 5xx on the login page, redirect without a code parameter.
    """

    pass


class FormNotFoundError(AuthFlowError):
    """Login page has no form with an action attribute.

    Usually means the identity provider changed its markup or login is
    temporarily unavailable.
    """

    pass


class InvalidCredentialsError(AuthFlowError):
    """Credential submission did not redirect back with a code.

    Any non-302 answer lands here, including MFA challenges and rate limit
    pages; status_code holds what the provider actually returned.
    """

    pass


class TokenEndpointError(AuthFlowError):
    """Authorization code exchange was rejected."""

    pass


class MalformedTokenResponseError(AuthFlowError):
    """Token endpoint answered with invalid JSON or without access_token."""

    pass


class ApiError(ItmoClientError):
    """Schedule API request failed or returned an unexpected payload."""

    pass
