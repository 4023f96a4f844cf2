"""webrequest - build, execute and deserialize HTTP requests."""

from ._config import Config
from ._deserializer import deserialize
from ._executor import RequestExecutor, execute
from ._request import WebRequest
from ._utils import parse_url_from_string, setup_logging
from ._utils.constants import DEFAULT_ATTEMPTS, DEFAULT_TIMEOUT_MS
from .models import (
    DataFormat,
    DeserializationError,
    FileParameter,
    InvalidParameterError,
    InvalidUrlError,
    Method,
    NetworkError,
    Parameter,
    ParameterType,
    WebRequestError,
    WebResponse,
)

__all__ = [
    "Config",
    "DEFAULT_ATTEMPTS",
    "DEFAULT_TIMEOUT_MS",
    "DataFormat",
    "DeserializationError",
    "FileParameter",
    "InvalidParameterError",
    "InvalidUrlError",
    "Method",
    "NetworkError",
    "Parameter",
    "ParameterType",
    "RequestExecutor",
    "WebRequest",
    "WebRequestError",
    "WebResponse",
    "deserialize",
    "execute",
    "parse_url_from_string",
    "setup_logging",
]
