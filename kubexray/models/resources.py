"""Resource identity helpers: GVRs, fully qualified names and label selectors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, order=True)
class GVR:
    """Group/version/resource triple identifying an object kind.

    The core group is the empty string, so ``GVR("", "v1", "pods")``
    renders as ``v1/pods`` and ``GVR("apps", "v1", "deployments")`` as
    ``apps/v1/deployments``.
    """

    group: str
    version: str
    resource: str

    def __str__(self) -> str:
        if not self.group:
            return f"{self.version}/{self.resource}"
        return f"{self.group}/{self.version}/{self.resource}"

    @classmethod
    def parse(cls, text: str) -> GVR:
        """Parse ``[group/]version/resource`` back into a GVR."""
        parts = text.split("/")
        if len(parts) == 2:
            return cls("", parts[0], parts[1])
        if len(parts) == 3:
            return cls(parts[0], parts[1], parts[2])
        raise ValueError(f"Invalid GVR: {text!r}. Must be [group/]version/resource")


# Containers are not an API resource; the pseudo GVR keeps them addressable in trees.
CO_GVR = GVR("", "v1", "containers")
POD_GVR = GVR("", "v1", "pods")
SEC_GVR = GVR("", "v1", "secrets")
CM_GVR = GVR("", "v1", "configmaps")
SA_GVR = GVR("", "v1", "serviceaccounts")
PVC_GVR = GVR("", "v1", "persistentvolumeclaims")
SVC_GVR = GVR("", "v1", "services")
DP_GVR = GVR("apps", "v1", "deployments")
STS_GVR = GVR("apps", "v1", "statefulsets")
DS_GVR = GVR("apps", "v1", "daemonsets")
RS_GVR = GVR("apps", "v1", "replicasets")
JOB_GVR = GVR("batch", "v1", "jobs")
CJ_GVR = GVR("batch", "v1", "cronjobs")


def fqn(ns: str, name: str) -> str:
    """Return the namespace qualified name ``ns/name``."""
    if not ns:
        return name
    return f"{ns}/{name}"


def namespaced(path: str) -> tuple[str, str]:
    """Split a fully qualified name into ``(namespace, name)``.

    Cluster scoped names have no slash and yield an empty namespace.
    """
    ns, sep, name = path.rpartition("/")
    if not sep:
        return "", path
    return ns, name


@dataclass(frozen=True)
class LabelSelector:
    """Equality based label selector. An empty selector matches everything."""

    match_labels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def everything(cls) -> LabelSelector:
        return cls()

    def empty(self) -> bool:
        return not self.match_labels

    def matches(self, labels: Mapping[str, str] | None) -> bool:
        labels = labels or {}
        return all(labels.get(k) == v for k, v in self.match_labels.items())

    def __str__(self) -> str:
        return ",".join(f"{k}={v}" for k, v in sorted(self.match_labels.items()))


@dataclass
class ContainerRes:
    """A container manifest together with its runtime status.

    ``container`` is the raw pod spec entry (``name``, ``env``, ``envFrom``,
    ...). ``status`` is the matching ``containerStatuses`` entry, if known.
    """

    container: dict[str, Any]
    status: dict[str, Any] | None = None
    is_init: bool = False

    @property
    def name(self) -> str:
        return str(self.container.get("name", ""))
