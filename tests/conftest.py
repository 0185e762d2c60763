import pytest

PROXY_ENV_VARS = (
    "http_proxy",
    "HTTP_PROXY",
    "no_proxy",
    "NO_PROXY",
    "FETCH_CONNECTION_IGNORE_ENV_PROXY",
    "FETCH_CONNECTION_USER_AGENT",
    "FETCH_CONNECTION_PARAMS_ENCODER",
)


@pytest.fixture(autouse=True)
def clean_proxy_env(monkeypatch):
    """Every test starts without proxy or package env vars."""
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class RecordingPipeline:
    """Pipeline stub that records descriptors and returns them."""

    def __init__(self):
        self.requests = []

    def call(self, request):
        self.requests.append(request)
        return request


@pytest.fixture
def pipeline():
    return RecordingPipeline()
