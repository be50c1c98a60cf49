"""
Concrete namespace-aware containers built on core.container.NamespaceAwareContainer.
"""

from containers.kafka import KafkaBrokerContainer, KafkaEndpoint
from containers.storm import StormTopologyActions, TopologyActionsContainer

__all__ = ["KafkaBrokerContainer", "KafkaEndpoint", "StormTopologyActions", "TopologyActionsContainer"]
