"""
Settings tests

Tests defaults, DOCZ_ environment overrides and immutability.
"""

import pytest
from pydantic import ValidationError

from docz.config import AppSettings


class TestAppSettings:
    """Test AppSettings"""

    def test_defaults(self, monkeypatch):
        """Defaults match the documented configuration"""
        for name in ("DOCZ_ENABLE_KATEX", "DOCZ_ASSET_ROOT", "DOCZ_FENCED_DIRECTIVES"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.fenced_directives == ["@code", "@math", "@style", "@css"]
        assert settings.stuck_limit == 1000
        assert settings.enable_katex is False
        assert settings.enable_tailwind is False
        assert settings.asset_root == "/third_party"
        assert settings.vendor_lock_path == "third_party/VENDOR.lock"
        assert settings.highlight_code is False
        assert settings.class_css_heuristic is False

    def test_environment_override(self, monkeypatch):
        """DOCZ_ variables override defaults"""
        monkeypatch.setenv("DOCZ_ENABLE_KATEX", "true")
        monkeypatch.setenv("DOCZ_ASSET_ROOT", "/static/vendor")
        monkeypatch.setenv("DOCZ_FENCED_DIRECTIVES", '["@code"]')
        settings = AppSettings(_env_file=None)
        assert settings.enable_katex is True
        assert settings.asset_root == "/static/vendor"
        assert settings.fenced_directives == ["@code"]

    def test_frozen(self):
        """Settings cannot be changed after construction"""
        settings = AppSettings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.enable_katex = True

    def test_stuck_limit_positive(self):
        """stuck_limit must be at least 1"""
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, stuck_limit=0)
