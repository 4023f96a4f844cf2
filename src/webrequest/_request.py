from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from ._deserializer import deserialize
from ._serializers import flatten_object, serialize_json, serialize_xml, to_text
from ._utils import join_url, parse_url_from_string
from ._utils.constants import CONTENT_TYPE_GZIP, CONTENT_TYPE_JSON, CONTENT_TYPE_XML
from .models.errors import InvalidParameterError, InvalidUrlError
from .models.parameters import (
    DataFormat,
    FileParameter,
    FileSource,
    Method,
    Parameter,
    ParameterType,
)
from .models.response import WebResponse

if TYPE_CHECKING:
    from ._config import Config

T = TypeVar("T")

_HEADER_KINDS = (ParameterType.HTTP_HEADER, ParameterType.COOKIE)


class WebRequest:
    """Mutable description of a single HTTP call.

    Mutators return the request itself so calls can be chained; none of them
    perform I/O. Execute the request with :func:`webrequest.execute` or
    :meth:`execute`.

    Examples:
        ```python
        from webrequest import WebRequest

        request = (
            WebRequest("https://api.example.com")
            .add_header("Accept", "application/json")
            .add_query_parameter("page", "2")
        )
        request.resource = "users/{id}"
        request.add_url_segment("id", "42")
        response = request.execute()
        user = request.deserialize(response, User)
        ```
    """

    def __init__(self, url: str, method: Method | str = Method.GET) -> None:
        self._url = parse_url_from_string(url)
        self._method = Method.parse(method)
        self._resource = ""
        self._attempts = 0

        self.parameters: list[Parameter] = []
        self.files: list[FileParameter] = []

        self.timeout = 0
        self.read_write_timeout = 0
        self.force_security_protocol = False
        self.always_multipart_form_data = False
        self.request_format = DataFormat.JSON
        self.root_element: str | None = None
        self.xml_namespace: str | None = None
        self.date_format: str | None = None
        self.credentials: tuple[str, str] | None = None
        self.on_before_deserialization: Callable[[WebResponse], None] | None = None

        self._response: WebResponse | None = None
        self._time = timedelta(0)

    def __repr__(self) -> str:
        return f"WebRequest(method={self._method.value!r}, url={self.url!r})"

    @property
    def url(self) -> str:
        return self._url

    @url.setter
    def url(self, value: str) -> None:
        self._url = parse_url_from_string(value)

    @property
    def method(self) -> Method:
        return self._method

    @method.setter
    def method(self, value: Method | str) -> None:
        self._method = Method.parse(value)

    @property
    def resource(self) -> str:
        """Path appended to the URL on execution, without a leading slash."""
        return self._resource

    @resource.setter
    def resource(self, value: str | None) -> None:
        resource = (value or "").lstrip("/")
        if resource:
            if not resource.isprintable():
                raise InvalidUrlError(value, "non-printable character in resource")
            parse_url_from_string(join_url(self._url, resource))
        self._resource = resource

    @property
    def attempts(self) -> int:
        """Number of times the caller reported sending this request."""
        return self._attempts

    def increase_num_attempts(self) -> None:
        self._attempts += 1

    @property
    def response(self) -> WebResponse | None:
        """The response of the last successful execution."""
        return self._response

    @property
    def time(self) -> timedelta:
        """How long the last successful execution took."""
        return self._time

    def record(self, response: WebResponse, elapsed: timedelta) -> None:
        self._response = response
        self._time = elapsed

    @property
    def body(self) -> Parameter | None:
        return next(
            (p for p in self.parameters if p.type is ParameterType.REQUEST_BODY), None
        )

    def set_url(self, url: str) -> "WebRequest":
        self.url = url
        return self

    def add_parameter(
        self,
        name: str,
        value: Any,
        type: ParameterType | str = ParameterType.GET_OR_POST,
        content_type: str | None = None,
    ) -> "WebRequest":
        """Add a parameter to the request.

        Args:
            name: Parameter name; for request bodies, conventionally the
                content type.
            value: Parameter value, must not be ``None``.
            type: Where the parameter is sent. ``GET_OR_POST`` goes to the
                query string for GET, DELETE, HEAD and OPTIONS and to the form
                body for POST and PUT.
            content_type: Content type of a request body parameter.

        Raises:
            InvalidParameterError: If ``name`` is empty or ``value`` is None,
                or a header or cookie is not printable ASCII. The request is
                left unchanged.
        """
        if not isinstance(name, str) or not name or value is None:
            raise InvalidParameterError(name=name)

        kind = ParameterType(type)
        if kind in _HEADER_KINDS:
            for text in (name, to_text(value, self.date_format)):
                if not (text.isascii() and text.isprintable()):
                    raise InvalidParameterError(
                        f"{kind.value} parameters must be printable ASCII, "
                        f"got {text!r}",
                        name=name,
                    )
        if kind is ParameterType.REQUEST_BODY:
            self._set_body(
                Parameter(name, value, kind, content_type=content_type or name)
            )
        else:
            self.parameters.append(Parameter(name, value, kind, content_type))
        return self

    def add_header(self, name: str, value: str) -> "WebRequest":
        return self.add_parameter(name, value, ParameterType.HTTP_HEADER)

    def add_cookie(self, name: str, value: str) -> "WebRequest":
        return self.add_parameter(name, value, ParameterType.COOKIE)

    def add_url_segment(self, name: str, value: str) -> "WebRequest":
        return self.add_parameter(name, value, ParameterType.URL_SEGMENT)

    def add_query_parameter(self, name: str, value: str) -> "WebRequest":
        return self.add_parameter(name, value, ParameterType.QUERY_STRING)

    def add_object(self, obj: Any, *included_properties: str) -> "WebRequest":
        """Add the public fields of ``obj`` as GET_OR_POST parameters.

        Only the fields named in ``included_properties`` are added when any are
        given. ``None`` values are skipped and sequences are comma-joined.
        """
        if obj is None:
            raise InvalidParameterError("Object to add must not be None.")
        pairs = flatten_object(obj, included_properties, self.date_format)
        self.parameters.extend(Parameter(name, value) for name, value in pairs)
        return self

    def add_file(
        self,
        name: str,
        source: FileSource,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> "WebRequest":
        """Attach a file, forcing a multipart body.

        Args:
            name: Form field name of the attachment.
            source: A filesystem path, a bytes buffer, or a callable that
                writes the content into the binary stream it receives.
            file_name: File name sent to the server. Defaults to the base name
                of a path source; required for the other sources.
            content_type: Content type of the part; guessed from the file name
                when omitted.

        Raises:
            InvalidParameterError: If the name is empty, a buffer or writer
                source has no file name, or the source type is unsupported.
        """
        if not isinstance(name, str) or not name or source is None:
            raise InvalidParameterError(name=name)
        self.files.append(FileParameter.create(name, source, file_name, content_type))
        return self

    def add_file_bytes(
        self,
        name: str,
        data: bytes,
        file_name: str,
        content_type: str = CONTENT_TYPE_GZIP,
    ) -> "WebRequest":
        return self.add_file(name, data, file_name, content_type)

    def add_body(self, obj: Any, xml_namespace: str | None = None) -> "WebRequest":
        """Serialize ``obj`` with the current request format and use it as body.

        Passing an XML namespace selects XML regardless of the current format.
        """
        if xml_namespace is not None or self.request_format is DataFormat.XML:
            return self.add_xml_body(obj, xml_namespace)
        return self.add_json_body(obj)

    def add_json_body(self, obj: Any) -> "WebRequest":
        if obj is None:
            raise InvalidParameterError("Body must not be None.")
        content = serialize_json(obj, self.date_format)
        self.request_format = DataFormat.JSON
        self._set_body(
            Parameter(
                CONTENT_TYPE_JSON,
                content,
                ParameterType.REQUEST_BODY,
                content_type=CONTENT_TYPE_JSON,
            )
        )
        return self

    def add_xml_body(self, obj: Any, xml_namespace: str | None = None) -> "WebRequest":
        if obj is None:
            raise InvalidParameterError("Body must not be None.")
        content = serialize_xml(
            obj, xml_namespace or self.xml_namespace, self.date_format
        )
        self.request_format = DataFormat.XML
        self._set_body(
            Parameter(
                CONTENT_TYPE_XML,
                content,
                ParameterType.REQUEST_BODY,
                content_type=CONTENT_TYPE_XML,
            )
        )
        return self

    def _set_body(self, parameter: Parameter) -> None:
        # the latest body replaces any previous one
        self.parameters = [
            p for p in self.parameters if p.type is not ParameterType.REQUEST_BODY
        ]
        self.parameters.append(parameter)

    def execute(self, config: "Config | None" = None) -> WebResponse:
        """Send the request once; see :func:`webrequest.execute`."""
        from ._executor import execute

        return execute(self, config=config)

    def deserialize(self, response: WebResponse, shape: type[T] | T) -> T:
        """Convert ``response`` into ``shape`` starting at :attr:`root_element`."""
        if self.on_before_deserialization is not None:
            self.on_before_deserialization(response)
        return deserialize(response, shape, root_element=self.root_element)
