import time
from datetime import timedelta
from logging import getLogger
from typing import Any
from urllib.parse import quote

import httpx

from ._config import Config
from ._request import WebRequest
from ._serializers import to_text
from ._utils import get_httpx_client_kwargs, join_url, setup_logging
from ._utils.constants import (
    HEADER_CONTENT_TYPE,
    HEADER_COOKIE,
    HEADER_USER_AGENT,
    LOGGER_NAME,
)
from .models.errors import NetworkError
from .models.parameters import ParameterType
from .models.response import WebResponse


class RequestExecutor:
    """Sends a :class:`WebRequest` and captures what the server returned.

    Each call to :meth:`execute` performs exactly one round trip over a client
    that lives only for that call; nothing is shared between executions.
    Retrying is up to the caller, who can use :attr:`WebRequest.attempts` and
    ``Config.default_attempts`` to drive a retry loop.
    """

    def __init__(self, config: Config | None = None) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._config = config or Config()
        if self._config.debug:
            setup_logging(debug=True)

    @property
    def config(self) -> Config:
        return self._config

    def build_timeout(self, request: WebRequest) -> httpx.Timeout:
        """Connect timeout from ``timeout``, read/write from ``read_write_timeout``.

        Values are in milliseconds; 0 falls back to the configured default.
        """
        connect_ms = request.timeout or self._config.default_timeout_ms
        read_write_ms = request.read_write_timeout or connect_ms
        return httpx.Timeout(
            read_write_ms / 1000,
            connect=connect_ms / 1000,
            pool=connect_ms / 1000,
        )

    def build_url(self, request: WebRequest) -> str:
        url = join_url(request.url, request.resource)
        for parameter in request.parameters:
            if parameter.type is ParameterType.URL_SEGMENT:
                url = url.replace(
                    f"{{{parameter.name}}}", quote(str(parameter.value), safe="")
                )
        return url

    def build_request_kwargs(self, request: WebRequest) -> dict[str, Any]:
        """Translate the request parameters into ``httpx.Client.request`` kwargs."""
        method = request.method
        body = request.body
        multipart = bool(request.files) or request.always_multipart_form_data

        headers: list[tuple[str, str]] = []
        params: list[tuple[str, str]] = []
        form: dict[str, list[str]] = {}
        cookies: list[str] = []

        for parameter in request.parameters:
            kind = parameter.resolve_type(method)
            value = to_text(parameter.value, request.date_format)
            if kind is ParameterType.HTTP_HEADER:
                headers.append((parameter.name, value))
            elif kind is ParameterType.COOKIE:
                cookies.append(f"{parameter.name}={value}")
            elif kind is ParameterType.QUERY_STRING:
                params.append((parameter.name, value))
            elif kind is ParameterType.FORM_DATA:
                # a body takes the place of the form, so fields move to the query
                if body is not None and not multipart:
                    params.append((parameter.name, value))
                else:
                    form.setdefault(parameter.name, []).append(value)

        if cookies:
            headers.append((HEADER_COOKIE, "; ".join(cookies)))
        if not any(k.lower() == HEADER_USER_AGENT.lower() for k, _ in headers):
            headers.insert(0, (HEADER_USER_AGENT, self._config.user_agent))

        kwargs: dict[str, Any] = {"params": params or None}

        if multipart:
            if body is not None:
                self._logger.warning(
                    f"Ignoring {body.content_type} body of multipart request "
                    f"to {request.url}"
                )
            kwargs["data"] = form or None
            kwargs["files"] = [(f.name, f.to_httpx()) for f in request.files] or None
        elif body is not None:
            if not any(k.lower() == HEADER_CONTENT_TYPE.lower() for k, _ in headers):
                headers.append((HEADER_CONTENT_TYPE, body.content_type or body.name))
            value = body.value
            kwargs["content"] = value if isinstance(value, bytes) else str(value)
        elif form:
            kwargs["data"] = form

        kwargs["headers"] = headers
        if request.credentials is not None:
            kwargs["auth"] = request.credentials
        return kwargs

    def execute(self, request: WebRequest) -> WebResponse:
        """Send ``request`` once and return the captured response.

        The response and the elapsed time are also stored on the request.
        Any HTTP status, including 4xx and 5xx, is a successful execution.

        Raises:
            NetworkError: If DNS resolution, connecting, the TLS handshake or
                the transfer failed, or a timeout expired.
        """
        start = time.perf_counter()

        url = self.build_url(request)
        request_kwargs = self.build_request_kwargs(request)
        client_kwargs = get_httpx_client_kwargs(
            timeout=self.build_timeout(request),
            force_tls12=request.force_security_protocol,
            verify_ssl=self._config.verify_ssl,
        )

        self._logger.debug(f"Request: {request.method.value} {url}")

        try:
            with httpx.Client(**client_kwargs) as client:
                response = client.request(request.method.value, url, **request_kwargs)
        except httpx.RequestError as e:
            elapsed = timedelta(seconds=time.perf_counter() - start)
            message = str(e) or type(e).__name__
            self._logger.warning(
                f"Request failed: {request.method.value} {url} - {message}"
            )
            raise NetworkError(
                message,
                url=url,
                response=WebResponse.from_error(message, url, elapsed),
            ) from e

        elapsed = timedelta(seconds=time.perf_counter() - start)
        result = WebResponse.from_httpx(response, elapsed)
        self._logger.debug(
            f"Response: {result.status_code} ({elapsed.total_seconds():.3f}s)"
        )

        request.record(result, elapsed)
        return result


def execute(request: WebRequest, config: Config | None = None) -> WebResponse:
    """Execute ``request`` with a one-off :class:`RequestExecutor`."""
    return RequestExecutor(config).execute(request)
