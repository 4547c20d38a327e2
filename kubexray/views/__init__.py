"""Custom view settings: per-kind, per-namespace column and sort overrides.

Exports:
    CustomView         -- Registry loaded from YAML, notifies listeners on reload.
    ViewConfigListener -- Protocol a view implements to receive its setting.
    ViewSetting        -- Column list plus ``col:asc|desc`` sort spec.
"""

from kubexray.views.custom_view import CustomView, ViewConfigListener
from kubexray.views.errors import SortSpecError, ViewsLoadError
from kubexray.views.settings import ViewSetting, is_blank_setting, settings_equal

__all__ = [
    "CustomView",
    "SortSpecError",
    "ViewConfigListener",
    "ViewSetting",
    "ViewsLoadError",
    "is_blank_setting",
    "settings_equal",
]
