"""Business Papers: totals and fiscal validation for business documents."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["get_version"]


def get_version() -> str:
    """Return the installed package version."""
    try:
        return version("business-papers")
    except PackageNotFoundError:  # pragma: no cover - fallback if package metadata missing
        return "0.1.0"
