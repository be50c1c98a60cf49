from dataclasses import dataclass, field
from typing import List, Optional

from core.container import NamespaceAwareContainer
from core.entities import Namespace
from core.errors import CatalogResolutionError


@dataclass
class KafkaEndpoint:
    namespace_id: int
    cluster_id: Optional[int]
    protocol: str
    bootstrap_servers: List[str] = field(default_factory=list)

    @property
    def bootstrap(self) -> str:
        return ",".join(self.bootstrap_servers)


class KafkaBrokerContainer(NamespaceAwareContainer[KafkaEndpoint]):
    SERVICE_NAME = "KAFKA"
    COMPONENT_NAME = "KAFKA_BROKER"
    DEFAULT_PROTOCOL = "PLAINTEXT"

    async def initialize_instance(self, namespace: Namespace) -> KafkaEndpoint:
        service = await self.first_service_for_namespace(namespace, self.SERVICE_NAME)
        if service is None:
            raise CatalogResolutionError(
                f"Service name {self.SERVICE_NAME} is not set in namespace {namespace}",
                CatalogResolutionError.SERVICE_NOT_CONFIGURED,
            )

        broker = await self.component(service, self.COMPONENT_NAME)
        self.assert_hosts_and_port(broker.name, broker.hosts, broker.port)

        return KafkaEndpoint(
            namespace_id=namespace.id,
            cluster_id=service.cluster_id,
            protocol=broker.protocol or self.DEFAULT_PROTOCOL,
            bootstrap_servers=[f"{host}:{broker.port}" for host in broker.hosts],
        )
