"""shift_hours package initialization."""

from ._build_info import APP_VERSION

__all__ = []

# The release process bumps ``APP_VERSION``; expose it as the package version.
__version__ = APP_VERSION
