"""Active Directory authentication strategy for FastAPI applications."""

from importlib.metadata import PackageNotFoundError, version

from .strategy import ActiveDirectoryStrategy

__all__ = ["ActiveDirectoryStrategy", "__version__"]

__version__: str
"""The version string of adstrategy (PEP 440 / SemVer compatible)."""

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0"
