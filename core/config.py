# core/config.py

"""
Runtime configuration for the roster store.

Settings are read from environment variables prefixed with `ROSTER_` (or a local `.env`
file) through pydantic-settings. `build_roster()` wires a `Roster` from these settings so
collaborators receive an explicitly constructed store instead of a global one.
`build_batch_runner()` does the same for the bulk-operation runner.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Roster store configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field("sqlite:///roster.sqlite")
    snapshot_dir: str = Field(
        default_factory=lambda: os.path.join(
            os.path.expanduser("~"), ".roster", "snapshots"
        )
    )
    log_level: str = Field("WARNING")
    batch_max_workers: int = Field(4, ge=1)
    echo_sql: bool = Field(False)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """
    Applies the log level and format from `settings` to the root logger.

    Args:
        settings (Settings | None): The settings to apply. Defaults to `get_settings()`.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)

    logging.basicConfig(format=LOG_FORMAT)
    # basicConfig is a no-op once the root logger has handlers, so the level is set separately
    logging.getLogger().setLevel(level)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.echo_sql else logging.WARNING
    )

    logger.debug(f"Logging configured at level {settings.log_level.upper()}")


def build_roster(settings: Settings | None = None):
    """
    Constructs a `Roster` backed by the configured engine and snapshot directory.

    Args:
        settings (Settings | None): The settings to use. Defaults to `get_settings()`.

    Returns:
        Roster: A new store with its caches already loaded.

    Notes:
        - The snapshot directory is created if missing.
        - Runs the one-time snapshot migration before loading, so data written only to the
          snapshot by an older install ends up in the engine.
    """
    from models.roster import Roster
    from storage.engine import SQLAlchemyEngine
    from storage.snapshot import SnapshotStore

    settings = settings or get_settings()
    os.makedirs(settings.snapshot_dir, exist_ok=True)

    roster = Roster(
        engine=SQLAlchemyEngine(settings.database_url, echo=settings.echo_sql),
        snapshot=SnapshotStore(settings.snapshot_dir),
    )

    migrate_response = roster.migrate_from_snapshot()
    if not migrate_response.success:
        logger.warning(f"Snapshot migration skipped: {migrate_response.detail}")

    roster.load_all()

    return roster


def build_batch_runner(roster, settings: Settings | None = None):
    """Constructs a `BatchOperationRunner` for `roster` sized by `settings.batch_max_workers`."""
    from core.batch_operations import BatchOperationRunner

    settings = settings or get_settings()

    return BatchOperationRunner(roster, max_workers=settings.batch_max_workers)
