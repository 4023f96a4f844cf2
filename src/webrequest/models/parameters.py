"""Building blocks of a web request: methods, parameter kinds and attachments."""

import io
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Callable, Union

from .errors import InvalidParameterError

FileWriter = Callable[[BinaryIO], None]
FileSource = Union[str, "os.PathLike[str]", bytes, bytearray, FileWriter]


class Method(str, Enum):
    """HTTP methods a request may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: Union["Method", str]) -> "Method":
        if isinstance(value, Method):
            return value
        return cls(str(value).upper())


class ParameterType(str, Enum):
    """Where a parameter ends up in the outgoing request."""

    QUERY_STRING = "QueryString"
    FORM_DATA = "FormData"
    URL_SEGMENT = "UrlSegment"
    HTTP_HEADER = "HttpHeader"
    REQUEST_BODY = "RequestBody"
    COOKIE = "Cookie"
    # Query string for GET, DELETE, HEAD and OPTIONS; form body for POST and PUT.
    GET_OR_POST = "GetOrPost"


class DataFormat(str, Enum):
    """Serialization format of the request body."""

    JSON = "Json"
    XML = "Xml"


QUERY_METHODS = frozenset({Method.GET, Method.DELETE, Method.HEAD, Method.OPTIONS})


@dataclass
class Parameter:
    name: str
    value: Any
    type: ParameterType = ParameterType.GET_OR_POST
    content_type: str | None = None

    def resolve_type(self, method: Method) -> ParameterType:
        """Concrete kind of the parameter for the given method."""
        if self.type is not ParameterType.GET_OR_POST:
            return self.type
        if method in QUERY_METHODS:
            return ParameterType.QUERY_STRING
        return ParameterType.FORM_DATA


@dataclass
class FileParameter:
    """A named attachment sent as part of a multipart body.

    Exactly one of ``path``, ``data`` or ``writer`` is set. Sources are only
    read when the request is executed.
    """

    name: str
    file_name: str
    content_type: str | None = None
    path: Path | None = None
    data: bytes | None = None
    writer: FileWriter | None = None

    @classmethod
    def create(
        cls,
        name: str,
        source: FileSource,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> "FileParameter":
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            return cls(
                name=name,
                file_name=file_name or path.name,
                content_type=content_type,
                path=path,
            )

        if not file_name:
            raise InvalidParameterError(
                "file_name is required for in-memory and writer sources", name=name
            )

        if isinstance(source, (bytes, bytearray)):
            return cls(
                name=name,
                file_name=file_name,
                content_type=content_type,
                data=bytes(source),
            )
        if callable(source):
            return cls(
                name=name,
                file_name=file_name,
                content_type=content_type,
                writer=source,
            )

        raise InvalidParameterError(
            f"Unsupported file source of type {type(source).__name__}; "
            "expected a path, bytes or a writer callable",
            name=name,
        )

    def read(self) -> bytes:
        if self.path is not None:
            return self.path.read_bytes()
        if self.data is not None:
            return self.data
        buffer = io.BytesIO()
        if self.writer is not None:
            self.writer(buffer)
        return buffer.getvalue()

    def to_httpx(self) -> tuple[str, bytes, str | None]:
        return (self.file_name, self.read(), self.content_type)
