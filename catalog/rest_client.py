# -*- coding: utf-8 -*-
"""
Catalog REST client (aiohttp).

Talks to the catalog service REST API:
- GET /namespaces/{id}
- GET /namespaces/{id}/mapping/{serviceName}      -> {"entities": [...]}
- GET /clusters/{id}
- GET /clusters/{id}/services/name/{serviceName}
- GET /services/{id}/components                   -> {"entities": [...]}

404 and a null "entities" both mean "absent" and are returned as None. For the
mapping endpoint this keeps
"not configured" (None) apart from "configured without clusters" ([]).
Connection errors, timeouts and 5xx responses are retried, then propagate.
"""

import asyncio
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import aiohttp
from tenacity import (
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from catalog.base import CatalogService
from core.entities import Cluster, Component, Namespace, NamespaceServiceClusterMapping, Service


def _is_server_error(exc: BaseException) -> bool:
    return isinstance(exc, aiohttp.ClientResponseError) and exc.status >= 500


class RestCatalogClient(CatalogService):

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        session: Optional[aiohttp.ClientSession] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.log = logger or logging.getLogger("catalog.rest")

        self._owned_session = session is None
        self.session = session

    async def close(self):
        if self._owned_session and self.session and not self.session.closed:
            await self.session.close()

    def _session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
            self._owned_session = True
        return self.session

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError))
        | retry_if_exception(_is_server_error),
        reraise=True,
    )
    async def _get_json(self, path: str) -> Optional[Any]:
        url = f"{self.base_url}{path}"
        async with self._session().get(url) as resp:
            if resp.status == 404:
                self.log.debug("Catalog GET %s -> 404", url)
                return None
            if resp.status >= 400:
                txt = await resp.text()
                self.log.error("Catalog error %s on %s: %s", resp.status, url, txt)
                resp.raise_for_status()
            return await resp.json()

    async def _get_entities(self, path: str) -> Optional[List[dict]]:
        body = await self._get_json(path)
        if body is None:
            return None
        if isinstance(body, list):
            return body
        # a null or missing "entities" is absent, not empty
        return body.get("entities")

    # ------------------------------------------------------------------
    # CatalogService
    # ------------------------------------------------------------------

    async def get_namespace(self, namespace_id: int) -> Optional[Namespace]:
        body = await self._get_json(f"/namespaces/{namespace_id}")
        return Namespace.from_dict(body) if body is not None else None

    async def list_service_cluster_mapping(
        self, namespace_id: int, service_name: str
    ) -> Optional[List[NamespaceServiceClusterMapping]]:
        items = await self._get_entities(f"/namespaces/{namespace_id}/mapping/{quote(service_name)}")
        if items is None:
            return None
        return [NamespaceServiceClusterMapping.from_dict(i) for i in items]

    async def get_cluster(self, cluster_id: int) -> Optional[Cluster]:
        body = await self._get_json(f"/clusters/{cluster_id}")
        return Cluster.from_dict(body) if body is not None else None

    async def get_service_by_name(self, cluster_id: int, service_name: str) -> Optional[Service]:
        body = await self._get_json(f"/clusters/{cluster_id}/services/name/{quote(service_name)}")
        return Service.from_dict(body) if body is not None else None

    async def list_components(self, service_id: int) -> List[Component]:
        items = await self._get_entities(f"/services/{service_id}/components")
        return [Component.from_dict(i) for i in items or []]
