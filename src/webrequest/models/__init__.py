from .errors import (
    DeserializationError,
    InvalidParameterError,
    InvalidUrlError,
    NetworkError,
    WebRequestError,
)
from .parameters import DataFormat, FileParameter, Method, Parameter, ParameterType
from .response import WebResponse

__all__ = [
    "DataFormat",
    "DeserializationError",
    "FileParameter",
    "InvalidParameterError",
    "InvalidUrlError",
    "Method",
    "NetworkError",
    "Parameter",
    "ParameterType",
    "WebRequestError",
    "WebResponse",
]
