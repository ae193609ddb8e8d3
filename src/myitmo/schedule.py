"""Personal schedule fetcher for the my.itmo.ru API.

GET {api_base}/schedule/schedule/personal?date_start=...&date_end=... returns

    {"data": [{"date": "2024-01-01", "lessons": [{"subject": ..., ...}]}]}

which is flattened into one string record per lesson with the day's date
merged in.
"""

import json
from datetime import date
from typing import Any

import requests
from pydantic import ValidationError

from src.myitmo.config import ItmoConfig, get_config
from src.myitmo.errors import ApiError
from src.myitmo.logging import get_logger
from src.myitmo.models import ScheduleResponse
from src.myitmo.utils import date_range_params, is_success

log = get_logger(__name__)

Record = dict[str, str]


class RawNumber(str):
    """JSON number kept as its source text (`1.50` stays `1.50`)."""


def _compact_json(value: Any) -> str:
    if isinstance(value, RawNumber):
        return str.__str__(value)
    if isinstance(value, dict):
        items = ",".join(
            f"{json.dumps(key, ensure_ascii=False)}:{_compact_json(item)}"
            for key, item in value.items()
        )
        return "{" + items + "}"
    if isinstance(value, list):
        return "[" + ",".join(_compact_json(item) for item in value) + "]"
    return json.dumps(value, ensure_ascii=False)


def stringify(value: Any) -> str:
    """Render a JSON lesson value as a string.

    Strings and numbers keep their text, null is empty, objects and arrays
    become compact JSON.
    """
    if isinstance(value, RawNumber):
        return str.__str__(value)
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return _compact_json(value)
    return str(value)


def flatten_schedule(schedule: ScheduleResponse) -> list[Record]:
    """One record per lesson, days and lessons in response order."""
    records: list[Record] = []
    for day in schedule.data:
        for lesson in day.lessons:
            record: Record = {"date": day.date}
            for key, value in lesson.items():
                record[key] = stringify(value)
            records.append(record)
    return records


class ScheduleFetcher:
    """Reads the personal schedule with a bearer token.

    The session only carries the connection pool; authentication is per
    request, so one fetcher can serve tokens of different users.
    """

    URL_PATH = "/schedule/schedule/personal"

    def __init__(
        self,
        config: ItmoConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or get_config()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def __enter__(self) -> "ScheduleFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the session if this fetcher created it."""
        if self._owns_session:
            self.session.close()

    def fetch_lessons(
        self, access_token: str, start_date: date, end_date: date
    ) -> list[Record]:
        """Fetch and flatten lessons between two dates (inclusive).

        Args:
            access_token: Bearer token from acquire_token().
            start_date: First day of the range.
            end_date: Last day of the range.

        Returns:
            List of records, each with a "date" key plus every lesson field.

        Raises:
            ApiError: On network failure, non-2xx status or unexpected JSON.
        """
        url = f"{self.config.itmo_api_base_url}{self.URL_PATH}"
        params = date_range_params(start_date, end_date)

        try:
            response = self.session.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {access_token}"},
                allow_redirects=False,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise ApiError(f"Schedule request failed: {e}") from e

        if not is_success(response):
            log.error("schedule_fetch_failed", status=response.status_code, **params)
            raise ApiError(
                f"Schedule API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            schedule = ScheduleResponse.model_validate(
                response.json(parse_float=RawNumber, parse_int=RawNumber)
            )
        except (ValueError, ValidationError) as e:
            log.error("schedule_response_malformed", error=str(e))
            raise ApiError(
                "Schedule API returned malformed JSON",
                status_code=response.status_code,
            ) from e

        records = flatten_schedule(schedule)
        log.info(
            "schedule_fetched",
            days=len(schedule.data),
            lessons=len(records),
            **params,
        )
        return records


def fetch_lessons(
    access_token: str,
    start_date: date,
    end_date: date,
    config: ItmoConfig | None = None,
) -> list[Record]:
    """Fetch lessons with a one-off ScheduleFetcher."""
    with ScheduleFetcher(config) as fetcher:
        return fetcher.fetch_lessons(access_token, start_date, end_date)
