"""Error types raised for contract violations.

Missing data (empty listings, absent attributes, inverted date ranges) is never
an error; those cases degrade to documented defaults. Only identifiers that do
not exist surface as exceptions.
"""

from __future__ import annotations


class GalleryViewError(Exception):
    """Base class for gallery view errors."""


class UnknownFilterTypeError(GalleryViewError, KeyError):
    """A filter type identifier is not present in the filter registry."""

    def __init__(self, filter_type: object) -> None:
        super().__init__(f"Unknown filter type: {filter_type!r}")
        self.filter_type = filter_type

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownSortMethodError(GalleryViewError, ValueError):
    """A sort/group method name does not map to a supported method."""

    def __init__(self, method: object) -> None:
        super().__init__(f"Unknown sorting method: {method!r}")
        self.method = method
