from ._logs import setup_logging
from ._ssl_context import create_ssl_context, get_httpx_client_kwargs
from ._url import join_url, parse_url_from_string
from ._user_agent import user_agent_value

__all__ = [
    "create_ssl_context",
    "get_httpx_client_kwargs",
    "join_url",
    "parse_url_from_string",
    "setup_logging",
    "user_agent_value",
]
