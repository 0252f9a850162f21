"""Config loader — YAML serialization and deserialization for QueryConfig.

Provides round-trip save/load so a session's query (affiliate code, date
range, endpoint) can be reviewed, version-controlled, and edited as a
human-readable YAML file.  Credentials are never written.
"""

from pathlib import Path

import yaml

from .models import QueryConfig


def save_config(config: QueryConfig, path: str | Path) -> None:
    """Serialize a QueryConfig to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.to_dict()
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def load_config(path: str | Path) -> QueryConfig:
    """Deserialize a QueryConfig from a YAML file.

    An empty file yields the default configuration.
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, "
                         f"got {type(data).__name__}")
    return QueryConfig.from_dict(data)
