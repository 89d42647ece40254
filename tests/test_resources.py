"""Unit tests for bundled resource lookup."""
import pytest

from turnchat import resources
from turnchat.resources import load_stylesheet, resource_path


@pytest.fixture(autouse=True)
def clear_root_cache():
    resources._package_root.cache_clear()
    yield
    resources._package_root.cache_clear()


class TestResourcePath:
    """Tests for resource resolution."""

    def test_stylesheet_ships_with_package(self):
        """Test that the bundled stylesheet is found and non-empty."""
        assert resource_path("turnchat", "assets", "turnchat.qss").is_file()
        assert "StatusLabel" in load_stylesheet()

    def test_pyinstaller_bundle_root(self, tmp_path, monkeypatch):
        """Test that a frozen build resolves from the unpack directory."""
        monkeypatch.setattr(resources.sys, "_MEIPASS", str(tmp_path), raising=False)

        assert resource_path() == tmp_path.resolve()
        assert resource_path("turnchat", "assets") == tmp_path.resolve() / "turnchat" / "assets"

    def test_missing_stylesheet_gives_empty_string(self):
        """Test that a missing stylesheet does not stop startup."""
        assert load_stylesheet("missing.qss") == ""
