"""Helm chart values for a simple scalable deployment of read and write pods."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PodResources:
    """CPU and memory requests and limits of one pod."""

    cpu_request: float
    cpu_limit: float
    memory_request: int
    memory_limit: int


@dataclass(frozen=True)
class Resources:
    """Resource requests and limits as written into the chart values."""

    request_cpu: float
    request_memory: int
    limit_cpu: float
    limit_memory: int

    @classmethod
    def from_pod(cls, pod: PodResources) -> Resources:
        return cls(
            request_cpu=pod.cpu_request,
            request_memory=pod.memory_request,
            limit_cpu=pod.cpu_limit,
            limit_memory=pod.memory_limit,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "requests": {"cpu": self.request_cpu, "memory": self.request_memory},
            "limits": {"cpu": self.limit_cpu, "memory": self.limit_memory},
        }


@dataclass(frozen=True)
class Component:
    """A deployment target: how many replicas and what each one gets."""

    replicas: int
    resources: Resources

    def to_dict(self) -> dict[str, Any]:
        return {"replicas": self.replicas, "resources": self.resources.to_dict()}


@dataclass(frozen=True)
class HelmValues:
    """The chart values covering authentication, the read path and the write path."""

    read: Component
    write: Component
    auth_enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        """The values in the key layout the chart expects."""
        return {
            "loki": {"auth_enabled": self.auth_enabled},
            "read": self.read.to_dict(),
            "write": self.write.to_dict(),
        }


def construct_helm_values(
    read_replicas: int,
    write_replicas: int,
    read_pod: PodResources,
    write_pod: PodResources,
) -> HelmValues:
    """Build chart values for the given replica counts and pod sizes."""
    return HelmValues(
        read=Component(replicas=read_replicas, resources=Resources.from_pod(read_pod)),
        write=Component(replicas=write_replicas, resources=Resources.from_pod(write_pod)),
        auth_enabled=False,
    )