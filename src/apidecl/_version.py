"""Installed apidecl version."""

from importlib.metadata import PackageNotFoundError, version

UNKNOWN_VERSION = "0.0.0+unknown"


def get_version() -> str:
    """Version of the installed ``apidecl`` distribution.

    Running from a source checkout that was never installed reports
    ``UNKNOWN_VERSION``.
    """
    try:
        return version("apidecl")
    except PackageNotFoundError:
        return UNKNOWN_VERSION
