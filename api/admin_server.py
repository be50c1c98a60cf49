# -*- coding: utf-8 -*-
"""
Admin API (aiohttp)

- GET  /health
- GET  /metrics
- POST /metrics/reset
- POST /namespaces/{namespace_id}/invalidate
- GET  /namespaces/{namespace_id}/services/{service_name}

Invalidation is how callers tell the containers that a namespace changed in the
catalog; the next lookup rebuilds the instance.
"""

import json
import logging
from dataclasses import asdict
from typing import Dict, Optional

from aiohttp import web

from catalog import lookup
from catalog.base import CatalogService
from core.container import NamespaceAwareContainer
from core.errors import CatalogResolutionError

CATALOG_KEY = web.AppKey("catalog", CatalogService)
CONTAINERS_KEY = web.AppKey("containers", dict)


def _namespace_id(request: web.Request) -> int:
    raw = request.match_info["namespace_id"]
    try:
        return int(raw)
    except ValueError:
        raise web.HTTPBadRequest(
            text=json.dumps({"error": f"invalid namespace id: {raw}"}), content_type="application/json"
        )


async def health(_):
    return web.json_response({"status": "ok"})


async def metrics(request: web.Request):
    containers: Dict[str, NamespaceAwareContainer] = request.app[CONTAINERS_KEY]
    body = {}
    for name, container in containers.items():
        stats = container.metrics.to_dict()
        stats["cached_namespaces"] = container.cached_namespace_ids()
        body[name] = stats
    return web.json_response(body)


async def reset_metrics(request: web.Request):
    containers: Dict[str, NamespaceAwareContainer] = request.app[CONTAINERS_KEY]
    for container in containers.values():
        container.metrics.reset()
    return web.json_response({"reset": sorted(containers)})


async def invalidate(request: web.Request):
    namespace_id = _namespace_id(request)
    for container in request.app[CONTAINERS_KEY].values():
        container.invalidate_instance(namespace_id)
    return web.json_response({"invalidated": namespace_id})


async def namespace_services(request: web.Request):
    namespace_id = _namespace_id(request)
    service_name = request.match_info["service_name"]
    catalog: CatalogService = request.app[CATALOG_KEY]

    namespace = await catalog.get_namespace(namespace_id)
    if namespace is None:
        return web.json_response({"error": f"Namespace {namespace_id} is not found"}, status=404)

    try:
        services = await lookup.services_for_namespace(catalog, namespace, service_name)
    except CatalogResolutionError as e:
        return web.json_response({"error": str(e), "reason": e.reason}, status=404)

    return web.json_response({"namespace": asdict(namespace), "services": [asdict(s) for s in services]})


def create_admin_app(catalog: CatalogService, containers: Dict[str, NamespaceAwareContainer]) -> web.Application:
    app = web.Application()
    app[CATALOG_KEY] = catalog
    app[CONTAINERS_KEY] = containers

    app.router.add_get("/health", health)
    app.router.add_get("/metrics", metrics)
    app.router.add_post("/metrics/reset", reset_metrics)
    app.router.add_post("/namespaces/{namespace_id}/invalidate", invalidate)
    app.router.add_get("/namespaces/{namespace_id}/services/{service_name}", namespace_services)
    return app


class AdminServer:
    def __init__(self, app: web.Application, host: str = "0.0.0.0", port: int = 8090,
                 logger: Optional[logging.Logger] = None):
        self.app = app
        self.host = host
        self.port = port
        self.log = logger or logging.getLogger("admin.server")
        self.runner: Optional[web.AppRunner] = None

    async def start(self):
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        self.log.info("Admin API started on %s:%s", self.host, self.port)

    async def stop(self):
        if self.runner:
            await self.runner.cleanup()
        self.log.info("Admin API stopped")
