"""Core data structures for kubexray."""

from kubexray.models.config import KubeXrayConfig
from kubexray.models.resources import (
    GVR,
    ContainerRes,
    LabelSelector,
    fqn,
    namespaced,
)

__all__ = [
    "GVR",
    "ContainerRes",
    "KubeXrayConfig",
    "LabelSelector",
    "fqn",
    "namespaced",
]
