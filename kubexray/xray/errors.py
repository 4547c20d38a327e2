"""Errors raised by xray renderers.

Only contract violations are errors. A reference that cannot be resolved is
recorded on its tree node instead.
"""

from __future__ import annotations


class XrayError(Exception):
    """Base class for tree building errors."""


class TypeMismatchError(XrayError):
    """A renderer received an object of the wrong type."""

    def __init__(self, expected: str, actual: object) -> None:
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(f"expected {expected}, but got {self.actual}")


class MissingContextError(XrayError):
    """The render context lacks a factory or a parent node."""

    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(f"no {what} found in render context")


class UnknownKindError(XrayError):
    """No renderer is registered for a kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"no xray renderer registered for {kind!r}")
