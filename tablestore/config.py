"""
Runtime configuration for tablestore.

Settings come from environment variables and can be overridden by
keyword arguments (the CLI passes its flags this way):

    TABLESTORE_LOG_LEVEL             DEBUG|INFO|WARNING|ERROR (default: WARNING)
    TABLESTORE_STRICT_COLUMNS        reject unknown column names on insert
    TABLESTORE_ENFORCE_FOREIGN_KEYS  check foreign key references on insert
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(environ: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class StoreConfig:
    log_level: str = "WARNING"
    strict_columns: bool = False
    enforce_foreign_keys: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'StoreConfig':
        """Build a config from the environment, then apply non-None overrides"""
        if environ is None:
            environ = os.environ

        config = cls(
            log_level=environ.get("TABLESTORE_LOG_LEVEL", "WARNING").upper(),
            strict_columns=_env_flag(environ, "TABLESTORE_STRICT_COLUMNS"),
            enforce_foreign_keys=_env_flag(environ, "TABLESTORE_ENFORCE_FOREIGN_KEYS"),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(config, **overrides) if overrides else config
