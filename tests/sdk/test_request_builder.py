"""Tests for building a WebRequest without touching the network."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel, Field, field_serializer

from webrequest import (
    DataFormat,
    InvalidParameterError,
    InvalidUrlError,
    Method,
    ParameterType,
    WebRequest,
)


class Item(BaseModel):
    name: str | None = None
    count: int = 0


class Profile(BaseModel):
    user_name: str = Field(serialization_alias="userName")
    password: str

    @field_serializer("password")
    def mask_password(self, value: str) -> str:
        return "***"


@dataclass
class Filter:
    status: str | None = None
    tags: list[str] | None = None
    limit: int = 10


class TestUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://api.example.com",
            "http://localhost:8080/api/v1",
            "https://api.example.com/search?q=test&page=2",
            "https://user@api.example.com:8443/path/",
        ],
    )
    def test_url_round_trip(self, url: str) -> None:
        assert WebRequest(url).url == url

    @pytest.mark.parametrize(
        "url", ["", "   ", "not a url", "ftp://files.example.com", "/relative/path"]
    )
    def test_invalid_url_fails_at_construction(self, url: str) -> None:
        with pytest.raises(InvalidUrlError):
            WebRequest(url)

    def test_set_url_returns_same_request(self, web_request: WebRequest) -> None:
        result = web_request.set_url("https://other.example.com")

        assert result is web_request
        assert web_request.url == "https://other.example.com"

    def test_invalid_set_url_keeps_previous_url(
        self, web_request: WebRequest, base_url: str
    ) -> None:
        with pytest.raises(InvalidUrlError):
            web_request.set_url("mailto:someone@example.com")

        assert web_request.url == base_url

    def test_invalid_url_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            WebRequest("nope")


class TestDefaults:
    def test_defaults(self, web_request: WebRequest) -> None:
        assert web_request.method is Method.GET
        assert web_request.resource == ""
        assert web_request.parameters == []
        assert web_request.files == []
        assert web_request.timeout == 0
        assert web_request.read_write_timeout == 0
        assert web_request.attempts == 0
        assert web_request.force_security_protocol is False
        assert web_request.request_format is DataFormat.JSON
        assert web_request.response is None

    def test_method_accepts_strings(self, web_request: WebRequest) -> None:
        web_request.method = "post"
        assert web_request.method is Method.POST

        assert WebRequest("https://api.example.com", "DELETE").method is Method.DELETE

    def test_unsupported_method_rejected(self, web_request: WebRequest) -> None:
        with pytest.raises(ValueError):
            web_request.method = "PATCH"

    def test_resource_leading_slash_stripped(self, web_request: WebRequest) -> None:
        web_request.resource = "/users/{id}"
        assert web_request.resource == "users/{id}"

    @pytest.mark.parametrize("resource", ["a\nb", "users\t1", "x\r\n"])
    def test_non_printable_resource_rejected(
        self, web_request: WebRequest, resource: str
    ) -> None:
        web_request.resource = "users"

        with pytest.raises(InvalidUrlError):
            web_request.resource = resource

        assert web_request.resource == "users"

    def test_resource_with_placeholders_accepted(self, web_request: WebRequest) -> None:
        web_request.resource = "users/{id}/orders"
        assert web_request.resource == "users/{id}/orders"

    def test_attempts_only_change_when_increased(self, web_request: WebRequest) -> None:
        web_request.increase_num_attempts()
        web_request.increase_num_attempts()
        assert web_request.attempts == 2


class TestParameters:
    def test_parameters_kept_in_insertion_order(self, web_request: WebRequest) -> None:
        web_request.add_parameter("b", "2").add_query_parameter("a", "1").add_header(
            "X-Trace", "abc"
        )

        assert [(p.name, p.value, p.type) for p in web_request.parameters] == [
            ("b", "2", ParameterType.GET_OR_POST),
            ("a", "1", ParameterType.QUERY_STRING),
            ("X-Trace", "abc", ParameterType.HTTP_HEADER),
        ]

    def test_mutators_return_same_instance(self, web_request: WebRequest) -> None:
        assert web_request.add_header("A", "1") is web_request
        assert web_request.add_cookie("session", "s") is web_request
        assert web_request.add_url_segment("id", "1") is web_request
        assert web_request.add_query_parameter("q", "x") is web_request
        assert (
            web_request.add_parameter("f", "v", ParameterType.FORM_DATA)
            is web_request
        )

    @pytest.mark.parametrize(
        "name, value",
        [("", "value"), ("name", None), (None, "value")],
    )
    def test_invalid_parameter_leaves_request_unchanged(
        self, web_request: WebRequest, name, value
    ) -> None:
        web_request.add_parameter("existing", "1")
        before = list(web_request.parameters)

        with pytest.raises(InvalidParameterError):
            web_request.add_parameter(name, value, ParameterType.QUERY_STRING)

        assert web_request.parameters == before

    @pytest.mark.parametrize(
        "method_name",
        ["add_header", "add_cookie", "add_url_segment", "add_query_parameter"],
    )
    def test_shortcuts_validate_like_add_parameter(
        self, web_request: WebRequest, method_name: str
    ) -> None:
        with pytest.raises(InvalidParameterError):
            getattr(web_request, method_name)("", "value")
        with pytest.raises(InvalidParameterError):
            getattr(web_request, method_name)("name", None)

        assert web_request.parameters == []

    @pytest.mark.parametrize(
        "method_name, name, value",
        [
            ("add_header", "X-Name", "caf\u00e9"),
            ("add_header", "X-Caf\u00e9", "1"),
            ("add_header", "X-Split", "a\r\nInjected: 1"),
            ("add_cookie", "session", "a\nb"),
        ],
    )
    def test_header_values_must_be_printable_ascii(
        self, web_request: WebRequest, method_name: str, name: str, value: str
    ) -> None:
        web_request.add_header("Accept", "application/json")
        before = list(web_request.parameters)

        with pytest.raises(InvalidParameterError):
            getattr(web_request, method_name)(name, value)

        assert web_request.parameters == before

    def test_non_string_header_value_accepted(self, web_request: WebRequest) -> None:
        web_request.add_header("X-Count", 3)
        assert web_request.parameters[0].value == 3

    def test_shortcut_kinds(self, web_request: WebRequest) -> None:
        web_request.add_header("h", "1")
        web_request.add_cookie("c", "2")
        web_request.add_url_segment("u", "3")
        web_request.add_query_parameter("q", "4")

        assert [p.type for p in web_request.parameters] == [
            ParameterType.HTTP_HEADER,
            ParameterType.COOKIE,
            ParameterType.URL_SEGMENT,
            ParameterType.QUERY_STRING,
        ]

    def test_parameter_kind_accepts_value_strings(
        self, web_request: WebRequest
    ) -> None:
        web_request.add_parameter("q", "1", "QueryString")
        assert web_request.parameters[0].type is ParameterType.QUERY_STRING

    def test_get_or_post_resolution(self, web_request: WebRequest) -> None:
        web_request.add_parameter("q", "1")
        parameter = web_request.parameters[0]

        assert parameter.resolve_type(Method.GET) is ParameterType.QUERY_STRING
        assert parameter.resolve_type(Method.HEAD) is ParameterType.QUERY_STRING
        assert parameter.resolve_type(Method.POST) is ParameterType.FORM_DATA
        assert parameter.resolve_type(Method.PUT) is ParameterType.FORM_DATA


class TestAddObject:
    def test_adds_public_fields(self, web_request: WebRequest) -> None:
        web_request.add_object(Filter(status="open", tags=["a", "b"]))

        assert [(p.name, p.value) for p in web_request.parameters] == [
            ("status", "open"),
            ("tags", "a,b"),
            ("limit", "10"),
        ]

    def test_included_properties_filter(self, web_request: WebRequest) -> None:
        web_request.add_object(Filter(status="open", limit=5), "limit")

        assert [(p.name, p.value) for p in web_request.parameters] == [("limit", "5")]

    def test_none_object_rejected(self, web_request: WebRequest) -> None:
        with pytest.raises(InvalidParameterError):
            web_request.add_object(None)


class TestBody:
    def test_json_body(self, web_request: WebRequest) -> None:
        web_request.add_json_body(Item(name="a", count=1))

        body = web_request.body
        assert body is not None
        assert body.type is ParameterType.REQUEST_BODY
        assert body.content_type == "application/json"
        assert body.value == '{"name": "a", "count": 1}'
        assert web_request.request_format is DataFormat.JSON

    def test_json_body_uses_model_serialization(self, web_request: WebRequest) -> None:
        web_request.add_json_body(Profile(user_name="a", password="p"))

        assert web_request.body is not None
        assert web_request.body.value == '{"userName": "a", "password": "***"}'

    def test_xml_body(self, web_request: WebRequest) -> None:
        web_request.add_xml_body(Item(name="a", count=1), "urn:items")

        body = web_request.body
        assert body is not None
        assert body.content_type == "application/xml"
        assert body.value == (
            '<Item xmlns="urn:items"><name>a</name><count>1</count></Item>'
        )
        assert web_request.request_format is DataFormat.XML

    def test_latest_body_wins(self, web_request: WebRequest) -> None:
        web_request.add_json_body({"first": True}).add_xml_body(Item(name="b"))

        bodies = [
            p for p in web_request.parameters if p.type is ParameterType.REQUEST_BODY
        ]
        assert len(bodies) == 1
        assert bodies[0].content_type == "application/xml"

    def test_body_parameter_replaces_serialized_body(
        self, web_request: WebRequest
    ) -> None:
        web_request.add_json_body({"a": 1})
        web_request.add_parameter("text/plain", "raw", ParameterType.REQUEST_BODY)

        bodies = [
            p for p in web_request.parameters if p.type is ParameterType.REQUEST_BODY
        ]
        assert len(bodies) == 1
        assert bodies[0].value == "raw"
        assert bodies[0].content_type == "text/plain"

    def test_body_keeps_other_parameters(self, web_request: WebRequest) -> None:
        web_request.add_header("A", "1").add_json_body({"a": 1}).add_json_body({"b": 2})

        assert [p.type for p in web_request.parameters] == [
            ParameterType.HTTP_HEADER,
            ParameterType.REQUEST_BODY,
        ]

    def test_add_body_follows_request_format(self, web_request: WebRequest) -> None:
        web_request.add_body({"a": 1})
        assert web_request.body is not None
        assert web_request.body.content_type == "application/json"

        web_request.request_format = DataFormat.XML
        web_request.add_body(Item(name="x"))
        assert web_request.body.content_type == "application/xml"

    def test_add_body_with_namespace_uses_xml(self, web_request: WebRequest) -> None:
        web_request.add_body(Item(name="x"), "urn:test")

        assert web_request.body is not None
        assert web_request.body.value.startswith('<Item xmlns="urn:test">')

    def test_none_body_rejected(self, web_request: WebRequest) -> None:
        with pytest.raises(InvalidParameterError):
            web_request.add_json_body(None)
        assert web_request.parameters == []


class TestFiles:
    def test_path_source_defaults_file_name(
        self, web_request: WebRequest, tmp_path
    ) -> None:
        path = tmp_path / "report.csv"
        path.write_bytes(b"a,b\n1,2\n")

        web_request.add_file("upload", str(path), content_type="text/csv")

        attachment = web_request.files[0]
        assert attachment.file_name == "report.csv"
        assert attachment.content_type == "text/csv"
        assert attachment.read() == b"a,b\n1,2\n"

    def test_bytes_source(self, web_request: WebRequest) -> None:
        web_request.add_file("upload", b"payload", "data.bin")

        assert web_request.files[0].read() == b"payload"

    def test_writer_source(self, web_request: WebRequest) -> None:
        web_request.add_file(
            "upload", lambda stream: stream.write(b"streamed"), "s.txt"
        )

        assert web_request.files[0].read() == b"streamed"

    def test_file_bytes_default_content_type(self, web_request: WebRequest) -> None:
        web_request.add_file_bytes("archive", b"\x1f\x8b", "archive.gz")

        assert web_request.files[0].content_type == "application/x-gzip"

    def test_bytes_source_requires_file_name(self, web_request: WebRequest) -> None:
        with pytest.raises(InvalidParameterError):
            web_request.add_file("upload", b"payload")
        assert web_request.files == []

    def test_unsupported_source_rejected(self, web_request: WebRequest) -> None:
        with pytest.raises(InvalidParameterError):
            web_request.add_file("upload", 42, "n.txt")  # type: ignore[arg-type]
        assert web_request.files == []

    def test_empty_name_rejected(self, web_request: WebRequest) -> None:
        with pytest.raises(InvalidParameterError):
            web_request.add_file("", b"payload", "data.bin")
