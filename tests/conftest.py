import sys
from pathlib import Path

import pytest

# Ensure local source package (src/webrequest) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from webrequest import Config, RequestExecutor, WebRequest  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    for name in (
        "WEBREQUEST_TIMEOUT_MS",
        "WEBREQUEST_ATTEMPTS",
        "WEBREQUEST_USER_AGENT",
        "WEBREQUEST_DISABLE_SSL_VERIFY",
        "WEBREQUEST_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def user_agent() -> str:
    return "WebRequest.Tests/1.0"


@pytest.fixture
def config(user_agent: str) -> Config:
    return Config(user_agent=user_agent)


@pytest.fixture
def executor(config: Config) -> RequestExecutor:
    return RequestExecutor(config)


@pytest.fixture
def web_request(base_url: str) -> WebRequest:
    """A plain GET request against the base URL."""
    return WebRequest(base_url)
