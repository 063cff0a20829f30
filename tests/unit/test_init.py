r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import arestrava


def test_package_version_is_string() -> None:
    """Test that __version__ is a string."""
    assert isinstance(arestrava.__version__, str)


def test_package_version_format() -> None:
    """Test that __version__ follows semantic versioning."""
    assert "." in arestrava.__version__


def test_all_exports_defined() -> None:
    """Test that all items in __all__ are defined in the module."""
    for name in arestrava.__all__:
        assert hasattr(arestrava, name), f"{name} is in __all__ but not defined in module"


def test_all_exports_count() -> None:
    """Test that __all__ has the expected number of exports."""
    # 2 layers + 1 domain client + 4 value types + 4 exceptions + 1 plan + 1 context + version
    assert len(arestrava.__all__) == 14


def test_main_exports() -> None:
    assert arestrava.RequestExecutor.__name__ == "RequestExecutor"
    assert issubclass(arestrava.StravaClient, arestrava.TokenLifecycleClient)
