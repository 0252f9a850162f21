"""API credential resolution.

The key is looked up in this order:

1. the ``LUXDROP_API_KEY`` environment variable
2. a ``LUXDROP_API_KEY=<value>`` line in a dotenv-style file
3. the configured fallback credential

Failures in steps 1-2 are logged and never surfaced to the user.
"""

import logging
import os
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_VAR = "LUXDROP_API_KEY"
_PREFIX = f"{ENV_VAR}="


def read_env_file(path: str | Path) -> str:
    """Return the API key from a dotenv-style file.

    Only the first ``LUXDROP_API_KEY=`` line counts; the value is everything
    after the first ``=``, stripped.

    Raises:
        ConfigError: If the file is unreadable or holds no non-empty key.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc

    for line in text.splitlines():
        if line.startswith(_PREFIX):
            key = line.split("=", 1)[1].strip()
            if not key:
                break
            return key
    raise ConfigError(f"{ENV_VAR} not found in {path}")


def resolve_credential(env_file: str | Path | None = ".env",
                       fallback: str = "") -> str:
    """Resolve the API key, falling back to *fallback* when unavailable."""
    from_env = os.environ.get(ENV_VAR, "").strip()
    if from_env:
        logger.debug("API key loaded from environment")
        return from_env

    if env_file:
        try:
            key = read_env_file(env_file)
            logger.info("API key loaded from %s", env_file)
            return key
        except ConfigError as exc:
            logger.warning("%s; using fallback API key", exc)
    else:
        logger.warning("No env file configured; using fallback API key")
    return fallback
