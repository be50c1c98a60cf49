# -*- coding: utf-8 -*-
"""
Topology actions container: one topology actions plug-in per namespace.

The plug-in is created by name through the container's InstanceFactory and then
configured with the STORM service endpoints resolved for the namespace.
"""

import logging
from typing import Any, Dict, List, Optional

from catalog.base import CatalogService
from core.container import NamespaceAwareContainer
from core.entities import Namespace
from core.errors import CatalogResolutionError
from core.factory import InstanceFactory


class StormTopologyActions:
    """Holds the endpoints needed to submit and manage topologies on one Storm cluster."""

    def __init__(self):
        self.conf: Dict[str, Any] = {}

    def configure(self, conf: Dict[str, Any]):
        self.conf = dict(conf)

    @property
    def api_root_url(self) -> Optional[str]:
        return self.conf.get("storm_api_root_url")

    @property
    def nimbus_seeds(self) -> List[str]:
        return list(self.conf.get("nimbus_seeds", []))

    def __repr__(self):
        return f"StormTopologyActions({self.api_root_url})"


def default_factory() -> InstanceFactory:
    return InstanceFactory({"storm": StormTopologyActions})


class TopologyActionsContainer(NamespaceAwareContainer):
    SERVICE_NAME = "STORM"
    UI_COMPONENT = "STORM_UI_SERVER"
    NIMBUS_COMPONENT = "NIMBUS"

    def __init__(
        self,
        catalog: CatalogService,
        actions_impl: str = "storm",
        factory: Optional[InstanceFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(catalog, factory=factory or default_factory(), logger=logger)
        self.actions_impl = actions_impl

    async def initialize_instance(self, namespace: Namespace):
        service = await self.first_service_for_namespace(namespace, self.SERVICE_NAME)
        if service is None:
            raise CatalogResolutionError(
                f"Service name {self.SERVICE_NAME} is not set in namespace {namespace}",
                CatalogResolutionError.SERVICE_NOT_CONFIGURED,
            )

        ui = await self.component(service, self.UI_COMPONENT)
        ui_host = ui.hosts[0] if ui.hosts else None
        self.assert_host_and_port(ui.name, ui_host, ui.port)

        nimbus = await self.component(service, self.NIMBUS_COMPONENT)
        self.assert_hosts_and_port(nimbus.name, nimbus.hosts, nimbus.port)

        conf = {
            "namespace_id": namespace.id,
            "cluster_id": service.cluster_id,
            "storm_api_root_url": f"http://{ui_host}:{ui.port}/api/v1",
            "nimbus_seeds": list(nimbus.hosts),
            "nimbus_port": nimbus.port,
        }

        actions = self.instantiate(self.actions_impl)
        actions.configure(conf)
        self.log.debug("Configured %s for namespace %s: %s", self.actions_impl, namespace, conf)
        return actions
