"""Server-side PKCE login against the ITMO ID Keycloak realm.

TokenAcquirer performs the whole Authorization Code + PKCE dance with plain
HTTP requests instead of a browser:

  1. GET the authorization endpoint (redirects disabled) to get the login page.
  2. Scrape the login form action from the HTML.
  3. POST username/password to that action; Keycloak answers 302 with
     ``Location: <redirect_uri>?code=...&state=...`` on success.
  4. Exchange the code plus the PKCE verifier at the token endpoint.

Each flow runs in its own requests.Session so Keycloak's login cookies never
leak between concurrent logins. Nothing is cached between calls.
"""

from collections.abc import Callable

import requests
from pydantic import ValidationError
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.myitmo.config import ItmoConfig, get_config
from src.myitmo.errors import (
    AuthEndpointError,
    FormNotFoundError,
    InvalidCredentialsError,
    MalformedTokenResponseError,
    TokenEndpointError,
)
from src.myitmo.logging import get_logger
from src.myitmo.models import PKCEPair, TokenResponse
from src.myitmo.pkce import generate_pkce
from src.myitmo.utils import (
    extract_authorization_code,
    extract_form_action,
    is_success,
)

logger = get_logger(__name__)

# Network failures worth another try on the idempotent authorization GET.
_RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout)


class TokenAcquirer:
    """Obtains access tokens for my.itmo.ru via Keycloak PKCE login."""

    def __init__(
        self,
        config: ItmoConfig | None = None,
        session_factory: Callable[[], requests.Session] | None = None,
    ) -> None:
        """Initialize TokenAcquirer.

        Args:
            config: Client configuration; defaults to get_config().
            session_factory: Callable returning a fresh session per flow;
                defaults to requests.Session, looked up per call.
        """
        self.config = config or get_config()
        self.session_factory = session_factory

    def acquire_token(self, username: str, password: str) -> str:
        """Log in and return a bearer access token.

        Args:
            username: ITMO ID username.
            password: ITMO ID password.

        Returns:
            The access_token string from the token endpoint.

        Raises:
            AuthEndpointError: Login page unavailable or redirect carried no code.
            FormNotFoundError: Login page has no form action to post to.
            InvalidCredentialsError: Credential POST did not answer 302.
            TokenEndpointError: Code exchange was rejected.
            MalformedTokenResponseError: Token answer lacks a usable access_token.
        """
        pkce = generate_pkce()
        logger.info("token_flow_started", username=username)

        factory = self.session_factory or requests.Session
        with factory() as session:
            login_page = self._fetch_login_page(session, pkce)

            action = extract_form_action(login_page.text, base_url=login_page.url)
            if not action:
                logger.error("login_form_not_found", url=login_page.url)
                raise FormNotFoundError(
                    "Login form action not found on the authorization page"
                )

            code = self._submit_credentials(session, action, username, password)
            access_token = self._exchange_code(session, code, pkce)

        logger.info("token_flow_succeeded", username=username)
        return access_token

    def _fetch_login_page(
        self, session: requests.Session, pkce: PKCEPair
    ) -> requests.Response:
        params = {
            "protocol": "oauth2",
            "response_type": "code",
            "client_id": self.config.itmo_client_id,
            "redirect_uri": self.config.itmo_redirect_uri,
            "scope": "openid",
            "state": self.config.itmo_auth_state,
            "code_challenge_method": "S256",
            "code_challenge": pkce.challenge,
        }

        retrying = Retrying(
            stop=stop_after_attempt(self.config.auth_page_attempts),
            wait=wait_fixed(self.config.auth_page_retry_wait),
            retry=retry_if_exception_type(_RETRYABLE_ERRORS),
        )
        try:
            for attempt in retrying:
                with attempt:
                    response = session.get(
                        self.config.auth_url,
                        params=params,
                        allow_redirects=False,
                        timeout=self.config.request_timeout,
                    )
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.warning(
                "auth_page_unreachable",
                attempts=e.last_attempt.attempt_number,
                error=str(cause),
            )
            raise AuthEndpointError(
                f"Authorization endpoint unreachable: {cause}"
            ) from cause
        except requests.RequestException as e:
            raise AuthEndpointError(f"Authorization request failed: {e}") from e

        if not is_success(response):
            logger.error("auth_page_failed", status=response.status_code)
            raise AuthEndpointError(
                f"Authorization endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug("auth_page_loaded", status=response.status_code)
        return response

    def _submit_credentials(
        self, session: requests.Session, action: str, username: str, password: str
    ) -> str:
        try:
            response = session.post(
                action,
                data={"username": username, "password": password},
                allow_redirects=False,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise AuthEndpointError(f"Login form submission failed: {e}") from e

        # Keycloak re-renders the login page (200) on bad credentials. MFA and
        # lockout pages are not told apart from that.
        if response.status_code != requests.codes.found:
            logger.warning("credentials_rejected", status=response.status_code)
            raise InvalidCredentialsError(
                "Invalid username or password",
                status_code=response.status_code,
            )

        location = response.headers.get("Location")
        code = extract_authorization_code(location)
        if code is None:
            logger.error("authorization_code_missing", has_location=bool(location))
            raise AuthEndpointError(
                "Login redirect did not carry an authorization code",
                status_code=response.status_code,
            )

        logger.debug("authorization_code_received", code_length=len(code))
        return code

    def _exchange_code(
        self, session: requests.Session, code: str, pkce: PKCEPair
    ) -> str:
        try:
            response = session.post(
                self.config.token_url,
                data={
                    "grant_type": "authorization_code",
                    "client_id": self.config.itmo_client_id,
                    "redirect_uri": self.config.itmo_redirect_uri,
                    "code": code,
                    "code_verifier": pkce.verifier,
                },
                allow_redirects=False,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise TokenEndpointError(f"Token request failed: {e}") from e

        if not is_success(response):
            logger.error("token_exchange_failed", status=response.status_code)
            raise TokenEndpointError(
                f"Token endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            token = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("token_response_malformed", error=str(e))
            raise MalformedTokenResponseError(
                "Token endpoint response has no access_token",
                status_code=response.status_code,
            ) from e

        return token.access_token


def acquire_token(
    username: str,
    password: str,
    config: ItmoConfig | None = None,
    session_factory: Callable[[], requests.Session] | None = None,
) -> str:
    """Log in with a one-off TokenAcquirer and return the access token."""
    return TokenAcquirer(config, session_factory).acquire_token(username, password)
