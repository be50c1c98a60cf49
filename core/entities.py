# -*- coding: utf-8 -*-
"""
Catalog entities: records borrowed from the catalog service.

The container never owns these objects; it only reads ids and names.
Both snake_case keys (YAML config) and camelCase keys (catalog REST API)
are accepted by ``from_dict``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _pick(data: Dict[str, Any], *keys: str, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class Namespace:
    id: Optional[int]
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Namespace":
        return cls(
            id=_to_int(data.get("id")),
            name=data.get("name", ""),
            description=data.get("description") or "",
        )

    def __str__(self):
        return f"{self.name}({self.id})"


@dataclass
class Cluster:
    id: int
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cluster":
        return cls(id=_to_int(data.get("id")), name=data.get("name", ""))


@dataclass
class Service:
    id: int
    name: str
    cluster_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        return cls(
            id=_to_int(data.get("id")),
            name=data["name"],
            cluster_id=_to_int(_pick(data, "cluster_id", "clusterId")),
        )


@dataclass
class Component:
    name: str
    id: Optional[int] = None
    service_id: Optional[int] = None
    hosts: List[str] = field(default_factory=list)
    protocol: Optional[str] = None
    port: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Component":
        return cls(
            name=data["name"],
            id=_to_int(data.get("id")),
            service_id=_to_int(_pick(data, "service_id", "serviceId")),
            hosts=list(data.get("hosts") or []),
            protocol=data.get("protocol"),
            port=_to_int(data.get("port")),
        )


@dataclass
class NamespaceServiceClusterMapping:
    namespace_id: int
    service_name: str
    cluster_id: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamespaceServiceClusterMapping":
        return cls(
            namespace_id=_to_int(_pick(data, "namespace_id", "namespaceId")),
            service_name=_pick(data, "service_name", "serviceName"),
            cluster_id=_to_int(_pick(data, "cluster_id", "clusterId")),
        )
