# Standard library
import os
from dataclasses import dataclass

# Local imports
from vertexdb.core.models import LogSink

# -----------------------------
# Constants
# -----------------------------

ENV_LOGGING = "VERTEXDB_LOGGING"
ENV_TIMESTAMPS = "VERTEXDB_TIMESTAMPS"
ENV_SOFT_DELETE = "VERTEXDB_SOFT_DELETE"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})

# -----------------------------
# Store configuration
# -----------------------------


@dataclass(frozen=True)
class StoreConfig:
    """Resolved construction options for a store."""

    logging: bool | LogSink = False
    timestamps: bool = False
    soft_delete: bool = False

    @classmethod
    def resolve(
        cls,
        logging: bool | LogSink | None = None,
        timestamps: bool | None = None,
        soft_delete: bool | None = None,
    ) -> "StoreConfig":
        """Build a config, falling back to environment variables.

        Args:
            logging: Log flag or sink callable (env: VERTEXDB_LOGGING)
            timestamps: Stamp created_at/updated_at (env: VERTEXDB_TIMESTAMPS)
            soft_delete: Mark rows deleted instead of removing them
                (env: VERTEXDB_SOFT_DELETE)

        Returns:
            StoreConfig with every option set
        """
        return cls(
            logging=_env_flag(ENV_LOGGING) if logging is None else logging,
            timestamps=_env_flag(ENV_TIMESTAMPS) if timestamps is None else timestamps,
            soft_delete=_env_flag(ENV_SOFT_DELETE)
            if soft_delete is None
            else soft_delete,
        )


def _env_flag(name: str) -> bool:
    env_value: str | None = os.getenv(name)
    if env_value is None:
        return False
    return env_value.strip().lower() in TRUTHY_VALUES
