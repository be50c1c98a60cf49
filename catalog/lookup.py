# -*- coding: utf-8 -*-
"""
Catalog lookups: resolve services and components configured for a namespace.

None of these helpers catch or retry: every resolution failure is raised as
CatalogResolutionError with a reason code and a readable message.
"""

from typing import List, Optional, Sequence

from catalog.base import CatalogService
from core.entities import Component, Namespace, Service
from core.errors import CatalogResolutionError


async def services_for_namespace(
    catalog: CatalogService, namespace: Namespace, service_name: str
) -> List[Service]:
    mappings = await catalog.list_service_cluster_mapping(namespace.id, service_name)
    if mappings is None:
        raise CatalogResolutionError(
            f"Service name {service_name} is not set in namespace {namespace.name}({namespace.id})",
            CatalogResolutionError.SERVICE_NOT_CONFIGURED,
        )

    services: List[Service] = []
    for mapping in mappings:
        cluster_id = mapping.cluster_id
        cluster = await catalog.get_cluster(cluster_id)
        if cluster is None:
            raise CatalogResolutionError(
                f"Cluster {cluster_id} is not found",
                CatalogResolutionError.CLUSTER_NOT_FOUND,
            )

        service = await catalog.get_service_by_name(cluster_id, service_name)
        if service is None:
            raise CatalogResolutionError(
                f"Service name {service_name} is not found in Cluster {cluster_id}",
                CatalogResolutionError.SERVICE_NOT_FOUND,
            )

        services.append(service)

    return services


async def first_service_for_namespace(
    catalog: CatalogService, namespace: Namespace, service_name: str
) -> Optional[Service]:
    services = await services_for_namespace(catalog, namespace, service_name)
    return services[0] if services else None


async def component(catalog: CatalogService, service: Service, component_name: str) -> Component:
    for comp in await catalog.list_components(service.id):
        if comp.name == component_name:
            return comp

    raise CatalogResolutionError(
        f"{service.name} doesn't have {component_name} as component",
        CatalogResolutionError.COMPONENT_NOT_FOUND,
    )


def assert_host_and_port(component_name: str, host: Optional[str], port: Optional[int]) -> None:
    if not host or port is None:
        raise CatalogResolutionError(
            f"{component_name} component doesn't have enough information - host: {host} / port: {port}",
            CatalogResolutionError.INCOMPLETE_HOST_PORT,
        )


def assert_hosts_and_port(
    component_name: str, hosts: Optional[Sequence[str]], port: Optional[int]
) -> None:
    if not hosts or port is None:
        raise CatalogResolutionError(
            f"{component_name} component doesn't have enough information - hosts: {hosts} / port: {port}",
            CatalogResolutionError.INCOMPLETE_HOST_PORT,
        )
