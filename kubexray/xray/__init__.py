"""Resource-relationship ("xray") trees.

Submodules:
    tree     -- TreeNode and resolution statuses.
    renderer -- Renderer contract, RenderContext and RendererRegistry.
    refs     -- Reference resolution (add_ref / validate).
    container, pod, workload, service_account -- built-in renderers.
    builder  -- TreeBuilder traversal driver and the default registry.
"""

from kubexray.xray.builder import TreeBuilder, default_registry
from kubexray.xray.errors import (
    MissingContextError,
    TypeMismatchError,
    UnknownKindError,
    XrayError,
)
from kubexray.xray.renderer import RenderContext, Renderer, RendererRegistry
from kubexray.xray.tree import STATUS_KEY, StatusKind, TreeNode

__all__ = [
    "STATUS_KEY",
    "MissingContextError",
    "RenderContext",
    "Renderer",
    "RendererRegistry",
    "StatusKind",
    "TreeBuilder",
    "TreeNode",
    "TypeMismatchError",
    "UnknownKindError",
    "XrayError",
    "default_registry",
]
