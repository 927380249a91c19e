"""Global options of h5extra.

Options can be preset through environment variables:

| variable                | option          |
| ----------------------- | --------------- |
| `H5EXTRA_OPEN_TIMEOUT`  | `open_timeout`  |
| `H5EXTRA_OPEN_INTERVAL` | `open_interval` |
| `H5EXTRA_VERBOSE`       | `verbose`       |

Retrying to open a locked container is disabled unless both the timeout and
the interval are positive (which is the default).
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from pydantic import BaseModel, Field
from typing_extensions import Final

ENV_PREFIX: Final[str] = "H5EXTRA_"


class H5ExtraOptions(BaseModel):
    """Global settings consulted by container operations."""

    open_timeout: float = Field(default=0, description="Seconds to keep retrying.")
    open_interval: float = Field(default=0, description="Seconds between retries.")
    verbose: bool = Field(default=True, description="Log progress messages.")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> H5ExtraOptions:
        """Load options, taking values from environment variables where set."""
        env = os.environ if environ is None else environ
        vals = {}
        for key in cls.model_fields.keys():
            envvar = f"{ENV_PREFIX}{key.upper()}"
            if envvar in env:
                vals[key] = env[envvar]
        return cls(**vals)

    @property
    def do_retry(self) -> bool:
        return self.open_timeout > 0 and self.open_interval > 0


options: H5ExtraOptions = H5ExtraOptions.from_env()
"""Currently active options."""


def set_options(**kwargs) -> H5ExtraOptions:
    """Validate and set new option values, return the previous options."""
    global options
    prev = options
    options = H5ExtraOptions(**{**prev.model_dump(), **kwargs})
    return prev


@contextmanager
def local_options(**kwargs) -> Iterator[H5ExtraOptions]:
    """Temporarily override options within a `with` block."""
    global options
    prev = set_options(**kwargs)
    try:
        yield options
    finally:
        options = prev


def get_options() -> H5ExtraOptions:
    return options


def resolve_verbose(verbose: Optional[bool]) -> bool:
    """Return passed verbosity, falling back to the configured default."""
    return options.verbose if verbose is None else verbose
