"""Shared HTTP helpers for the login flow and schedule API."""

from datetime import date
from urllib.parse import parse_qs, urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from src.myitmo.logging import get_logger

log = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def is_success(response: requests.Response) -> bool:
    """True for 2xx. requests' Response.ok also accepts 3xx."""
    return 200 <= response.status_code < 300


def date_range_params(start_date: date, end_date: date) -> dict[str, str]:
    """Query parameters for a schedule date range.

    datetime values are accepted too; only the date part is sent.
    """
    return {
        "date_start": start_date.strftime(DATE_FORMAT),
        "date_end": end_date.strftime(DATE_FORMAT),
    }


def extract_form_action(html: str, base_url: str | None = None) -> str | None:
    """Return the action URL of the first form that has one.

    HTML entities (``&amp;`` in Keycloak's session_code/execution query) are
    decoded by the parser. A relative action is resolved against base_url.

    Args:
        html: Login page markup.
        base_url: URL the markup was served from.

    Returns:
        Absolute action URL, or None if no form carries an action attribute.
    """
    soup = BeautifulSoup(html, "html.parser")
    form = soup.find("form", attrs={"action": True})
    if form is None:
        log.debug("form_action_missing", forms=len(soup.find_all("form")))
        return None

    action = form["action"].strip()
    if base_url:
        action = urljoin(base_url, action)
    return action


def extract_authorization_code(location: str | None) -> str | None:
    """Read the ``code`` query parameter from a redirect Location."""
    if not location:
        return None
    query = parse_qs(urlsplit(location).query)
    codes = query.get("code")
    return codes[0] if codes else None
