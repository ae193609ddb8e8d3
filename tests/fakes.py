# In-memory HTTP session returning real requests.Response objects
from dataclasses import dataclass, field

import requests


PROVIDER = "https://id.example/auth/realms/itmo"
API_BASE = "https://my.example/api"
REDIRECT_URI = "https://my.itmo.ru/login/callback"


def make_response(
    status_code: int = 200,
    body: str = "",
    headers: dict | None = None,
    url: str = "",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    response.url = url
    return response


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict = field(default_factory=dict)


class FakeSession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls: list[Call] = []
        self.closed = False

    def _next(self, method, url, **kwargs):
        self.calls.append(Call(method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


