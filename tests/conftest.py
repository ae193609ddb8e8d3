import pytest

from src.myitmo.config import ItmoConfig
from tests.fakes import API_BASE, PROVIDER, REDIRECT_URI


@pytest.fixture
def config() -> ItmoConfig:
    return ItmoConfig(
        _env_file=None,
        itmo_provider_url=PROVIDER,
        itmo_api_base_url=API_BASE,
        itmo_redirect_uri=REDIRECT_URI,
        auth_page_retry_wait=0,
    )
