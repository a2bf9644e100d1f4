"""
massprops package root.

Mass-property aggregation and text reports for articulated kinematic trees.
"""

from importlib.metadata import version, PackageNotFoundError


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return version("massprops")
        except PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["__version__"]
