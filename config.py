import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "ROWSET_"

@dataclass(frozen=True)
class Settings:
    database: str = ":memory:"
    primary_key: str = "id"
    foreign_key_suffix: str = "_id"
    list_suffix: str = "_list"
    identifier_delimiter: str = '"'
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "Settings":
        """Builds settings from ROWSET_* environment variables, falling back to the defaults."""
        defaults = cls()
        return cls(
            database=environ.get(f"{ENV_PREFIX}DATABASE", defaults.database),
            primary_key=environ.get(f"{ENV_PREFIX}PRIMARY_KEY", defaults.primary_key),
            foreign_key_suffix=environ.get(f"{ENV_PREFIX}FOREIGN_KEY_SUFFIX", defaults.foreign_key_suffix),
            list_suffix=environ.get(f"{ENV_PREFIX}LIST_SUFFIX", defaults.list_suffix),
            log_level=environ.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
        )
