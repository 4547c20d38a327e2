"""Errors raised by the custom view registry."""

from __future__ import annotations


class ViewsLoadError(Exception):
    """The views file exists but could not be read or parsed."""

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"cannot load views from {path}: {cause}")
        self.path = path
        self.cause = cause


class SortSpecError(ValueError):
    """A view's sort column is missing or not of the form ``col:asc|desc``."""
