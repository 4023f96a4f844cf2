from os import environ as env

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from ._utils._user_agent import user_agent_value
from ._utils.constants import (
    DEFAULT_ATTEMPTS,
    DEFAULT_TIMEOUT_MS,
    ENV_ATTEMPTS,
    ENV_DEBUG,
    ENV_DISABLE_SSL_VERIFY,
    ENV_TIMEOUT_MS,
    ENV_USER_AGENT,
)

_TRUTHY = ("1", "true", "yes", "on")


class Config(BaseModel):
    """Execution policy shared by the requests an executor runs.

    ``default_attempts`` is advisory: it is the retry budget callers are
    expected to honour, the executor itself sends a request exactly once.
    """

    default_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    default_attempts: int = Field(default=DEFAULT_ATTEMPTS, ge=1)
    user_agent: str = Field(default_factory=user_agent_value)
    verify_ssl: bool = True
    debug: bool = False

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("user_agent must not be empty")
        return value

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build a config from ``WEBREQUEST_*`` environment variables.

        A ``.env`` file in the working directory is loaded first; explicit
        keyword arguments win over the environment.
        """
        load_dotenv()

        values: dict[str, object] = {}
        if env.get(ENV_TIMEOUT_MS):
            values["default_timeout_ms"] = env[ENV_TIMEOUT_MS]
        if env.get(ENV_ATTEMPTS):
            values["default_attempts"] = env[ENV_ATTEMPTS]
        if env.get(ENV_USER_AGENT):
            values["user_agent"] = env[ENV_USER_AGENT]
        if env.get(ENV_DISABLE_SSL_VERIFY):
            values["verify_ssl"] = env[ENV_DISABLE_SSL_VERIFY].lower() not in _TRUTHY
        if env.get(ENV_DEBUG):
            values["debug"] = env[ENV_DEBUG].lower() in _TRUTHY

        values.update(overrides)
        return cls.model_validate(values)
