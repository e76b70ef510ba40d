"""
Environment driven defaults for the mapper.

Settings are read from ``REST_MAPPER_*`` environment variables (and a ``.env``
file in the working directory when present). Model classes may override
``base_url`` and ``transport`` individually.
"""
import functools
import typing

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REST_MAPPER_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base_url: typing.Optional[str] = Field(
        default=None,
        description="Root URL prepended to every resource path.",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout handed to the default transport.",
    )
    verify_tls: bool = Field(
        default=True,
        description="Whether the default transport verifies TLS certificates.",
    )
    user_agent: str = Field(
        default="rest-mapper",
        min_length=1,
        description="User-Agent sent by the default transport.",
    )
    default_headers: typing.Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request by the default transport.",
    )


@functools.lru_cache(maxsize=None)
def get_settings() -> Settings:
    return Settings()
