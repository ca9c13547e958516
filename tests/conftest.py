import os as _os
import sys

import pytest

# Ensure project root is importable (so `import smon...` works reliably across environments)
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from smon.settings import Settings  # noqa: E402


ROSTER_TOML = """
up_services = ["api-gateway", "auth-service"]
down_services = ["notification-service"]
"""


@pytest.fixture
def roster_path(tmp_path):
    """A small roster file: two services up, one down."""
    path = tmp_path / "config.toml"
    path.write_text(ROSTER_TOML, encoding="utf-8")
    return path


@pytest.fixture
def make_settings():
    """Build Settings with fast intervals and no simulated work."""

    def _make(config_path, **overrides) -> Settings:
        values = dict(
            config_path=str(config_path),
            poll_interval_s=0.1,
            load_interval_s=0.1,
            max_work_s=0.0,
            error_probability=0.0,
        )
        values.update(overrides)
        return Settings(**values)

    return _make
