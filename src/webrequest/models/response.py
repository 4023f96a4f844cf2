from datetime import timedelta

import httpx
from pydantic import BaseModel, ConfigDict, Field


class WebResponse(BaseModel):
    """Snapshot of a completed HTTP round trip."""

    model_config = ConfigDict(frozen=True)

    status_code: int = 0
    status_description: str = ""
    headers: list[tuple[str, str]] = Field(default_factory=list)
    content: str = ""
    raw_bytes: bytes = b""
    content_type: str | None = None
    response_uri: str | None = None
    error_message: str | None = None
    elapsed: timedelta = timedelta(0)

    @classmethod
    def from_httpx(cls, response: httpx.Response, elapsed: timedelta) -> "WebResponse":
        return cls(
            status_code=response.status_code,
            status_description=response.reason_phrase,
            headers=list(response.headers.multi_items()),
            content=response.text,
            raw_bytes=response.content,
            content_type=response.headers.get("content-type"),
            response_uri=str(response.url),
            elapsed=elapsed,
        )

    @classmethod
    def from_error(
        cls, message: str, url: str | None, elapsed: timedelta
    ) -> "WebResponse":
        return cls(error_message=message, response_uri=url, elapsed=elapsed)

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code <= 299

    def header_values(self, name: str) -> list[str]:
        """All values of a header, matched case-insensitively, in received order."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def header(self, name: str) -> str | None:
        values = self.header_values(name)
        return values[0] if values else None

    def __repr__(self) -> str:
        return (
            f"WebResponse(status_code={self.status_code!r}, "
            f"content_type={self.content_type!r}, "
            f"response_uri={self.response_uri!r})"
        )
