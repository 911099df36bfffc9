r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import pnendpoint


def test_package_version_is_string() -> None:
    assert isinstance(pnendpoint.__version__, str)
    assert "." in pnendpoint.__version__


def test_all_exports_defined() -> None:
    for name in pnendpoint.__all__:
        assert hasattr(pnendpoint, name), f"{name} is in __all__ but not defined in module"


def test_all_exports_sorted() -> None:
    assert pnendpoint.__all__ == sorted(pnendpoint.__all__)


def test_operations_exports() -> None:
    from pnendpoint import operations

    for name in operations.__all__:
        assert hasattr(operations, name)
