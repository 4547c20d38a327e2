"""Live-state accessors.

Exports:
    Factory     -- Protocol the xray renderers query.
    KubeFactory -- kubernetes-asyncio backed implementation with a warm cache.
"""

from kubexray.factory.base import Factory
from kubexray.factory.errors import FactoryError, UnsupportedResourceError
from kubexray.factory.kube import KubeFactory

__all__ = [
    "Factory",
    "FactoryError",
    "KubeFactory",
    "UnsupportedResourceError",
]
