"""Directory service configuration models.

See Also:
    [Directory][relayoptimizer.services.directory.Directory]: The service
        class that consumes this configuration.
"""

from __future__ import annotations

import jmespath
from pydantic import Field, field_validator

from relayoptimizer.core.base_service import BaseServiceConfig
from relayoptimizer.services.common.constants import TOP_RELAYS_API


class DirectoryConfig(BaseServiceConfig):
    """Directory service configuration.

    The ``jmespath`` field declares how relay URL strings are extracted from
    the JSON response. It accepts any valid
    `JMESPath <https://jmespath.org/>`_ expression. The default ``[*]``
    assumes the response is a flat JSON array of URL strings.

    Examples of common expressions::

        [*]                   -- flat list of strings (default)
        data.relays           -- nested path to a list
        data.relays[*].url    -- list of objects, extract "url" field
        keys(@)               -- dict keys are the URLs
    """

    url: str = Field(default=TOP_RELAYS_API, description="Relay directory API endpoint")
    timeout: float = Field(default=10.0, ge=0.1, le=120.0, description="Request timeout")
    jmespath: str = Field(
        default="[*]",
        description="JMESPath expression to extract URL strings from the JSON response",
    )
    max_response_size: int = Field(
        default=5_242_880,
        ge=1024,
        le=52_428_800,
        description="Maximum API response body size in bytes (default: 5 MB)",
    )
    limit: int = Field(default=10, ge=1, le=1000, description="Default number of relays returned")

    @field_validator("jmespath")
    @classmethod
    def _validate_jmespath(cls, v: str) -> str:
        try:
            jmespath.compile(v)
        except jmespath.exceptions.ParseError as e:
            msg = f"invalid JMESPath expression: {e}"
            raise ValueError(msg) from e
        return v


__all__ = ["DirectoryConfig"]
