from abc import ABC, abstractmethod
from typing import List, Optional

from core.entities import Cluster, Component, Namespace, NamespaceServiceClusterMapping, Service


class CatalogService(ABC):
    """
    Read-only view of the catalog used by containers.

    ``list_service_cluster_mapping`` returns None when the service is not
    configured for the namespace at all, and an empty list when it is configured
    without clusters. Callers rely on that distinction.
    """

    @abstractmethod
    async def get_namespace(self, namespace_id: int) -> Optional[Namespace]:
        ...

    @abstractmethod
    async def list_service_cluster_mapping(
        self, namespace_id: int, service_name: str
    ) -> Optional[List[NamespaceServiceClusterMapping]]:
        ...

    @abstractmethod
    async def get_cluster(self, cluster_id: int) -> Optional[Cluster]:
        ...

    @abstractmethod
    async def get_service_by_name(self, cluster_id: int, service_name: str) -> Optional[Service]:
        ...

    @abstractmethod
    async def list_components(self, service_id: int) -> List[Component]:
        ...

    async def close(self):
        pass
