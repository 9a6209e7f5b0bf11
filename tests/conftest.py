"""
Pytest configuration and shared fixtures

Add global fixtures here that are used across multiple test modules.
"""

import pytest

# Register plugins for fixtures from separate files
pytest_plugins = ["tests.fixtures.record_fixtures"]

BITPROFILE_ENV_VARS = (
    "BITPROFILE_STORE_PATH",
    "BITPROFILE_FRAGMENT_PATHS",
    "BITPROFILE_BACKUP_DIR",
    "BITPROFILE_MAX_RECORDS",
    "BITPROFILE_IDENTITY_PREFIX",
    "BITPROFILE_MERGE_DECAY",
    "BITPROFILE_PREDICTION_LENGTH",
    "BITPROFILE_CONSOLIDATION_MIN_INTERVAL",
    "BITPROFILE_CONSOLIDATION_MAX_INTERVAL",
    "LOG_LEVEL",
    "LOG_MODE",
    "LOG_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove every bitprofile environment variable for the duration of a test.

    Returns:
        monkeypatch, for tests that set their own values
    """
    for name in BITPROFILE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # drop the cached config so get_config() rebuilds from this environment
    monkeypatch.setattr("bitprofile.config.settings._config", None)
    monkeypatch.setattr("bitprofile.config.settings.load_dotenv", lambda *a, **k: False)
    return monkeypatch
