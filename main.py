#!/usr/bin/env python3
import asyncio
import logging
import os
import signal
from pathlib import Path

import yaml

from api.admin_server import AdminServer, create_admin_app
from catalog.base import CatalogService
from catalog.memory import InMemoryCatalog
from catalog.rest_client import RestCatalogClient
from containers.kafka import KafkaBrokerContainer
from containers.storm import TopologyActionsContainer
from core.errors import ContainerError
from utils.logging_setup import setup_logging

PROJECT_ROOT = Path(__file__).resolve().parent
CONFIG_PATH = Path(os.environ.get("NS_CONTAINER_CONFIG", PROJECT_ROOT / "config" / "config.yaml"))


class ServerConfig:
    def __init__(self, cfg: dict):
        s = cfg.get("server", {})
        self.host = s.get("host", "0.0.0.0")
        self.port = int(s.get("port", 8090))
        self.log_level = s.get("log_level", "INFO")
        self.catalog = cfg.get("catalog", {})
        self.containers = cfg.get("containers", {})
        self.warmup_namespaces = [int(n) for n in cfg.get("warmup_namespaces", [])]

    @classmethod
    def load(cls, path: Path):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(data), data


def build_catalog(cfg: ServerConfig, logger: logging.Logger) -> CatalogService:
    kind = cfg.catalog.get("type", "memory")
    if kind == "rest":
        return RestCatalogClient(
            cfg.catalog["base_url"],
            timeout=cfg.catalog.get("timeout", 10),
            logger=logger.getChild("catalog"),
        )
    if kind == "memory":
        return InMemoryCatalog(cfg.catalog, logger=logger.getChild("catalog"))
    raise ValueError(f"Unknown catalog type: {kind}")


def build_containers(cfg: ServerConfig, catalog: CatalogService, logger: logging.Logger) -> dict:
    storm_cfg = cfg.containers.get("topology_actions", {})
    return {
        "kafka": KafkaBrokerContainer(catalog, logger=logger.getChild("kafka")),
        "topology_actions": TopologyActionsContainer(
            catalog,
            actions_impl=storm_cfg.get("impl", "storm"),
            logger=logger.getChild("topology_actions"),
        ),
    }


async def warm_up(catalog: CatalogService, containers: dict, namespace_ids, logger: logging.Logger):
    for namespace_id in namespace_ids:
        namespace = await catalog.get_namespace(namespace_id)
        if namespace is None:
            logger.warning("Warm-up skipped, namespace %s is not in the catalog", namespace_id)
            continue
        for name, container in containers.items():
            try:
                await container.find_instance(namespace)
            except ContainerError as e:
                logger.warning("Warm-up of %s for namespace %s failed: %s", name, namespace, e)


def stop_handler(stop_event: asyncio.Event, log: logging.Logger):
    def _stop():
        log.info("Shutting down...")
        stop_event.set()

    return _stop


async def shutdown(server: AdminServer, catalog: CatalogService, log: logging.Logger):
    await server.stop()
    await catalog.close()
    log.info("Stopped")


async def main():
    cfg, _ = ServerConfig.load(CONFIG_PATH)
    setup_logging(cfg.log_level)
    log = logging.getLogger("ns_container")
    log.debug("Namespace container service starting...")

    catalog = build_catalog(cfg, log)
    containers = build_containers(cfg, catalog, log)
    server = AdminServer(create_admin_app(catalog, containers), cfg.host, cfg.port, log)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    stop = stop_handler(stop_event, log)
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop)

    await server.start()
    try:
        await warm_up(catalog, containers, cfg.warmup_namespaces, log)
        await stop_event.wait()
    finally:
        await shutdown(server, catalog, log)


if __name__ == "__main__":
    asyncio.run(main())
