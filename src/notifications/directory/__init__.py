"""Merchant directory factory.

Provides get_directory() / set_directory() so the storage collaborator can
plug in its own accessor. Defaults to the in-memory directory.
"""

from notifications.directory.fake_adapter import InMemoryMerchantDirectory
from notifications.directory.port import MerchantDirectory

_current_directory: MerchantDirectory | None = None


def get_directory() -> MerchantDirectory:
    """Return the current merchant directory. Defaults to InMemoryMerchantDirectory."""
    global _current_directory
    if _current_directory is None:
        _current_directory = InMemoryMerchantDirectory()
    return _current_directory


def set_directory(directory: MerchantDirectory) -> None:
    """Override the active merchant directory."""
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    """Reset to the default directory."""
    global _current_directory
    _current_directory = None
