# tests/test_config.py

import logging

import pytest
from pydantic import ValidationError as SettingsValidationError

from core.config import Settings, build_batch_runner, build_roster, configure_logging
from models.classroom import Classroom
from storage.snapshot import SnapshotStore


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("ROSTER_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("ROSTER_BATCH_MAX_WORKERS", "8")

    settings = Settings()

    assert settings.database_url == "sqlite://"
    assert settings.batch_max_workers == 8
    assert settings.log_level == "WARNING"


def test_settings_reject_zero_workers():
    with pytest.raises(SettingsValidationError):
        Settings(batch_max_workers=0)


def test_build_roster_migrates_old_snapshot(tmp_path, sample_class):
    snapshot_dir = tmp_path / "snapshots"
    snapshot_dir.mkdir()
    SnapshotStore(str(snapshot_dir)).write_collection(Classroom, [sample_class])

    settings = Settings(
        database_url=f"sqlite:///{tmp_path}/roster.sqlite",
        snapshot_dir=str(snapshot_dir),
    )
    roster = build_roster(settings)

    assert roster.get_class("c001") == sample_class
    assert not roster.is_degraded
    assert SnapshotStore(str(snapshot_dir)).has_completed_migration()


@pytest.fixture
def restore_log_levels():
    loggers = [logging.getLogger(), logging.getLogger("sqlalchemy"), logging.getLogger("sqlalchemy.engine")]
    levels = [logger.level for logger in loggers]
    yield
    for logger, level in zip(loggers, levels):
        logger.setLevel(level)


def test_configure_logging_applies_levels(restore_log_levels):
    configure_logging(Settings(log_level="debug", echo_sql=True))

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

    configure_logging(Settings(log_level="nonsense"))

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_build_batch_runner_uses_configured_workers(roster):
    runner = build_batch_runner(roster, Settings(batch_max_workers=7))

    try:
        assert runner.max_workers == 7
    finally:
        runner.close()
