"""Tests for lazy import system in relayoptimizer.__init__."""

from __future__ import annotations

import importlib
import sys

import pytest


class TestLazyImports:
    """Test PEP 562 lazy loading in relayoptimizer.__init__."""

    def test_lazy_import_does_not_eagerly_load(self) -> None:
        """Verify that importing relayoptimizer does not eagerly load subpackages."""
        saved = {n: m for n, m in sys.modules.items() if n.startswith("relayoptimizer")}
        try:
            for name in saved:
                del sys.modules[name]

            importlib.import_module("relayoptimizer")

            assert "relayoptimizer.core" not in sys.modules
            assert "relayoptimizer.models" not in sys.modules
            assert "relayoptimizer.services" not in sys.modules
            assert "relayoptimizer.nips" not in sys.modules
        finally:
            for name in [n for n in sys.modules if n.startswith("relayoptimizer")]:
                del sys.modules[name]
            sys.modules.update(saved)

    def test_lazy_import_resolves_on_access(self) -> None:
        """Verify that lazy attributes resolve correctly."""
        from relayoptimizer import Prober
        from relayoptimizer.services.prober import Prober as DirectProber

        assert Prober is DirectProber

    def test_lazy_import_caches_after_first_access(self) -> None:
        """Verify that resolved attributes are cached in globals."""
        import relayoptimizer

        _ = relayoptimizer.RelayLists

        assert "RelayLists" in vars(relayoptimizer)

    def test_lazy_import_invalid_attribute(self) -> None:
        """Verify that invalid attributes raise AttributeError."""
        import relayoptimizer

        with pytest.raises(AttributeError, match="no_such_thing"):
            _ = getattr(relayoptimizer, "no_such_thing")  # noqa: B009

    def test_all_exports_are_in_lazy_imports(self) -> None:
        """Verify that __all__ and _LAZY_IMPORTS are in sync."""
        import relayoptimizer

        assert set(relayoptimizer.__all__) == set(relayoptimizer._LAZY_IMPORTS)

    def test_dir_returns_all(self) -> None:
        """Verify that dir(relayoptimizer) returns __all__."""
        import relayoptimizer

        assert dir(relayoptimizer) == relayoptimizer.__all__

    def test_version_is_accessible(self) -> None:
        """Verify that __version__ is set from package metadata."""
        import relayoptimizer

        assert isinstance(relayoptimizer.__version__, str)
        assert relayoptimizer.__version__
