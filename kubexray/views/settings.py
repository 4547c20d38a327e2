"""Per-view column and sort overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kubexray.views.errors import SortSpecError


@dataclass
class ViewSetting:
    """Column list and sort spec for one view.

    Empty ``columns`` means the default columns; empty ``sort_column`` means
    the default sort. ``sort_column`` reads ``<column>:<asc|desc>``.
    """

    columns: list[str] = field(default_factory=list)
    sort_column: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> ViewSetting:
        raw = raw or {}
        return cls(
            columns=[str(c) for c in raw.get("columns") or []],
            sort_column=str(raw.get("sortColumn") or ""),
        )

    def copy(self) -> ViewSetting:
        return ViewSetting(columns=list(self.columns), sort_column=self.sort_column)

    def has_cols(self) -> bool:
        return len(self.columns) > 0

    def is_blank(self) -> bool:
        return not self.columns and not self.sort_column

    def sort_col(self) -> tuple[str, bool]:
        """Return ``(column, ascending)``.

        Raises:
            SortSpecError: no sort column, or not of the form ``col:asc|desc``.
        """
        if not self.sort_column:
            raise SortSpecError("no sort column specified")
        tt = self.sort_column.split(":")
        if len(tt) < 2:
            raise SortSpecError(f"invalid sort column spec: {self.sort_column!r}. must be col-name:asc|desc")
        return tt[0], tt[1] == "asc"


def settings_equal(a: ViewSetting | None, b: ViewSetting | None) -> bool:
    """Compare two optional settings; column order matters."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return a.columns == b.columns and a.sort_column == b.sort_column


def is_blank_setting(vs: ViewSetting | None) -> bool:
    return vs is None or vs.is_blank()
