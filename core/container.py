# -*- coding: utf-8 -*-
"""
Namespace-aware container: one lazily built instance per namespace.

Subclasses implement ``initialize_instance``; the container memoizes its result
by namespace id until ``invalidate_instance`` is called. Concurrent first
lookups of the same id share a single initialization task owned by the container.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

from catalog import lookup
from catalog.base import CatalogService
from core.entities import Component, Namespace, Service
from core.factory import InstanceFactory
from core.metrics import ContainerMetrics

T = TypeVar("T")


def _consume_result(task: asyncio.Future):
    # every caller may have been cancelled; the outcome is still observed here
    if not task.cancelled():
        task.exception()


class NamespaceAwareContainer(ABC, Generic[T]):

    def __init__(
        self,
        catalog: CatalogService,
        factory: Optional[InstanceFactory] = None,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ):
        self.catalog = catalog
        self.factory = factory or InstanceFactory()
        self.name = name or self.__class__.__name__
        self.log = logger or logging.getLogger(self.name)
        self.metrics = ContainerMetrics()

        self._instances: Dict[int, T] = {}
        # Initializations in flight, keyed by namespace id
        self._pending: Dict[int, asyncio.Future] = {}

    # ------------------------------------------------------------------
    # Instance cache
    # ------------------------------------------------------------------

    async def find_instance(self, namespace: Namespace) -> T:
        if namespace is None or namespace.id is None:
            raise ValueError("find_instance requires a namespace with an id")

        namespace_id = namespace.id
        self.metrics.lookups += 1

        if namespace_id in self._instances:
            self.metrics.hits += 1
            return self._instances[namespace_id]

        pending = self._pending.get(namespace_id)
        if pending is not None:
            self.metrics.joins += 1
        else:
            self.metrics.misses += 1
            pending = asyncio.ensure_future(self._initialize(namespace))
            pending.add_done_callback(_consume_result)
            self._pending[namespace_id] = pending

        # cancelling one caller must not cancel the initialization other callers share
        return await asyncio.shield(pending)

    async def _initialize(self, namespace: Namespace) -> T:
        namespace_id = namespace.id
        task = asyncio.current_task()

        try:
            instance = await self.initialize_instance(namespace)
        except asyncio.CancelledError:
            self._release(namespace_id, task)
            raise
        except Exception as e:
            self.metrics.initialization_failures += 1
            self._release(namespace_id, task)
            self.log.error("Failed to initialize %s for namespace %s: %s", self.name, namespace, e)
            raise

        if self._pending.get(namespace_id) is task:
            del self._pending[namespace_id]
            self._instances[namespace_id] = instance
            self.log.info("Initialized %s for namespace %s", self.name, namespace)
        else:
            self.log.info(
                "Namespace %s was invalidated during initialization, %s not cached",
                namespace,
                self.name,
            )

        self.metrics.initializations += 1
        self.metrics.last_initialized_at = datetime.now()
        return instance

    def invalidate_instance(self, namespace_id: Optional[int]) -> None:
        removed = self._instances.pop(namespace_id, None) is not None
        removed = self._pending.pop(namespace_id, None) is not None or removed
        if removed:
            self.metrics.invalidations += 1
            self.log.info("Invalidated %s for namespace id %s", self.name, namespace_id)

    def cached_namespace_ids(self) -> List[int]:
        return list(self._instances.keys())

    def __contains__(self, namespace_id) -> bool:
        return namespace_id in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def _release(self, namespace_id: int, task: asyncio.Future):
        if self._pending.get(namespace_id) is task:
            del self._pending[namespace_id]

    @abstractmethod
    async def initialize_instance(self, namespace: Namespace) -> T:
        """
        Build the instance for ``namespace``. Raising leaves nothing cached.
        """

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    async def services_for_namespace(self, namespace: Namespace, service_name: str) -> List[Service]:
        return await lookup.services_for_namespace(self.catalog, namespace, service_name)

    async def first_service_for_namespace(self, namespace: Namespace, service_name: str) -> Optional[Service]:
        return await lookup.first_service_for_namespace(self.catalog, namespace, service_name)

    async def component(self, service: Service, component_name: str) -> Component:
        return await lookup.component(self.catalog, service, component_name)

    def instantiate(self, name: str) -> T:
        return self.factory.instantiate(name)

    @staticmethod
    def assert_host_and_port(component_name: str, host: Optional[str], port: Optional[int]) -> None:
        lookup.assert_host_and_port(component_name, host, port)

    @staticmethod
    def assert_hosts_and_port(component_name: str, hosts: Optional[Sequence[str]], port: Optional[int]) -> None:
        lookup.assert_hosts_and_port(component_name, hosts, port)
