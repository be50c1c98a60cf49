# -*- coding: utf-8 -*-
"""
In-memory catalog: namespaces, clusters, services and components declared in config.yaml.
"""

import logging
from typing import Dict, List, Optional, Tuple

from catalog.base import CatalogService
from core.entities import Cluster, Component, Namespace, NamespaceServiceClusterMapping, Service


class InMemoryCatalog(CatalogService):

    def __init__(self, cfg: Optional[dict] = None, logger: Optional[logging.Logger] = None):
        """
        cfg → the ``catalog`` section of config.yaml.
        """
        self.log = logger or logging.getLogger("InMemoryCatalog")

        self.namespaces: Dict[int, Namespace] = {}
        self.clusters: Dict[int, Cluster] = {}
        self.services: Dict[Tuple[int, str], Service] = {}
        self.components: Dict[int, List[Component]] = {}
        self.mappings: Dict[Tuple[int, str], List[NamespaceServiceClusterMapping]] = {}

        self._load(cfg or {})

    # ------------------------------------------------------------------
    # Load config
    # ------------------------------------------------------------------

    def _load(self, cfg: dict):
        for item in cfg.get("namespaces", []):
            self.add_namespace(Namespace.from_dict(item))
        for item in cfg.get("clusters", []):
            self.add_cluster(Cluster.from_dict(item))
        for item in cfg.get("services", []):
            self.add_service(Service.from_dict(item))
        for item in cfg.get("components", []):
            self.add_component(Component.from_dict(item))
        for item in cfg.get("mappings", []):
            self.add_mapping(NamespaceServiceClusterMapping.from_dict(item))

        self.log.info(
            "Loaded %d namespaces, %d clusters, %d services, %d mappings",
            len(self.namespaces),
            len(self.clusters),
            len(self.services),
            sum(len(m) for m in self.mappings.values()),
        )

    def add_namespace(self, namespace: Namespace):
        self.namespaces[namespace.id] = namespace

    def add_cluster(self, cluster: Cluster):
        self.clusters[cluster.id] = cluster

    def add_service(self, service: Service):
        self.services[(service.cluster_id, service.name)] = service

    def add_component(self, component: Component):
        self.components.setdefault(component.service_id, []).append(component)

    def add_mapping(self, mapping: NamespaceServiceClusterMapping):
        key = (mapping.namespace_id, mapping.service_name)
        self.mappings.setdefault(key, []).append(mapping)

    # ------------------------------------------------------------------
    # CatalogService
    # ------------------------------------------------------------------

    async def get_namespace(self, namespace_id: int) -> Optional[Namespace]:
        return self.namespaces.get(namespace_id)

    async def list_service_cluster_mapping(
        self, namespace_id: int, service_name: str
    ) -> Optional[List[NamespaceServiceClusterMapping]]:
        mappings = self.mappings.get((namespace_id, service_name))
        return list(mappings) if mappings is not None else None

    async def get_cluster(self, cluster_id: int) -> Optional[Cluster]:
        return self.clusters.get(cluster_id)

    async def get_service_by_name(self, cluster_id: int, service_name: str) -> Optional[Service]:
        return self.services.get((cluster_id, service_name))

    async def list_components(self, service_id: int) -> List[Component]:
        return list(self.components.get(service_id, []))
