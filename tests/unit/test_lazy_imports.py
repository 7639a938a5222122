"""Tests for lazy import system in subrpc.__init__."""

from __future__ import annotations

import importlib
import sys

import pytest


class TestLazyImports:
    """Test PEP 562 lazy loading in subrpc.__init__."""

    def test_lazy_import_does_not_eagerly_load(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify that importing subrpc does not eagerly load subpackages."""
        # Drop cached subrpc modules; monkeypatch restores them afterwards
        for mod in list(sys.modules):
            if mod == "subrpc" or mod.startswith("subrpc."):
                monkeypatch.delitem(sys.modules, mod)

        importlib.import_module("subrpc")

        assert "subrpc.core" not in sys.modules
        assert "subrpc.models" not in sys.modules
        assert "subrpc.probe" not in sys.modules
        assert "subrpc.commands" not in sys.modules

    def test_lazy_import_resolves_on_access(self) -> None:
        """Verify that lazy attributes resolve correctly."""
        from subrpc import Registry
        from subrpc.core.registry import Registry as DirectRegistry

        assert Registry is DirectRegistry

    def test_lazy_import_caches_after_first_access(self) -> None:
        """Verify that resolved attributes are cached in globals."""
        import subrpc

        _ = subrpc.Filter

        assert "Filter" in vars(subrpc)

    def test_lazy_import_invalid_attribute(self) -> None:
        import subrpc

        with pytest.raises(AttributeError, match="no_such_thing"):
            _ = getattr(subrpc, "no_such_thing")  # noqa: B009

    def test_all_exports_are_in_lazy_imports(self) -> None:
        """Verify that __all__ and _LAZY_IMPORTS are in sync."""
        import subrpc

        assert set(subrpc.__all__) == set(subrpc._LAZY_IMPORTS)

    def test_dir_returns_all(self) -> None:
        import subrpc

        assert dir(subrpc) == subrpc.__all__

    def test_version_is_accessible(self) -> None:
        """Verify that __version__ is set from package metadata."""
        import subrpc

        assert isinstance(subrpc.__version__, str)
        assert subrpc.__version__
