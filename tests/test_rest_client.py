import aiohttp
import pytest
from aiohttp import web
from tenacity import wait_none

from catalog import lookup
from catalog.rest_client import RestCatalogClient
from core.entities import Namespace


def create_fake_catalog_app():
    namespaces = {1: {"id": 1, "name": "prod", "streamingEngine": "STORM"}}
    mappings = {
        (1, "KAFKA"): [
            {"namespaceId": 1, "serviceName": "KAFKA", "clusterId": 1},
            {"namespaceId": 1, "serviceName": "KAFKA", "clusterId": 2},
        ],
        (1, "HDFS"): [],
        (1, "HBASE"): None,
    }
    clusters = {1: {"id": 1, "name": "east"}, 2: {"id": 2, "name": "west"}}
    services = {
        (1, "KAFKA"): {"id": 10, "clusterId": 1, "name": "KAFKA"},
        (2, "KAFKA"): {"id": 20, "clusterId": 2, "name": "KAFKA"},
    }
    components = {10: [{"id": 100, "serviceId": 10, "name": "KAFKA_BROKER", "hosts": ["k1"], "port": 6667}]}

    async def get_namespace(request):
        body = namespaces.get(int(request.match_info["id"]))
        if body is None:
            raise web.HTTPNotFound()
        return web.json_response(body)

    async def get_mapping(request):
        key = (int(request.match_info["id"]), request.match_info["service"])
        if key not in mappings:
            raise web.HTTPNotFound()
        return web.json_response({"entities": mappings[key]})

    async def get_cluster(request):
        body = clusters.get(int(request.match_info["id"]))
        if body is None:
            raise web.HTTPNotFound()
        return web.json_response(body)

    async def get_service(request):
        body = services.get((int(request.match_info["id"]), request.match_info["service"]))
        if body is None:
            raise web.HTTPNotFound()
        return web.json_response(body)

    async def get_components(request):
        return web.json_response({"entities": components.get(int(request.match_info["id"]), [])})

    app = web.Application()
    app.router.add_get("/api/v1/catalog/namespaces/{id}", get_namespace)
    app.router.add_get("/api/v1/catalog/namespaces/{id}/mapping/{service}", get_mapping)
    app.router.add_get("/api/v1/catalog/clusters/{id}", get_cluster)
    app.router.add_get("/api/v1/catalog/clusters/{id}/services/name/{service}", get_service)
    app.router.add_get("/api/v1/catalog/services/{id}/components", get_components)
    return app


@pytest.mark.asyncio
async def test_rest_client_resolves_entities(aiohttp_server):
    server = await aiohttp_server(create_fake_catalog_app())
    client = RestCatalogClient(str(server.make_url("/api/v1/catalog")))
    try:
        ns = await client.get_namespace(1)
        assert ns == Namespace(1, "prod")
        assert await client.get_namespace(9) is None

        mappings = await client.list_service_cluster_mapping(1, "KAFKA")
        assert [m.cluster_id for m in mappings] == [1, 2]
        assert await client.list_service_cluster_mapping(1, "HDFS") == []
        assert await client.list_service_cluster_mapping(1, "STORM") is None

        assert (await client.get_cluster(2)).name == "west"
        assert await client.get_cluster(3) is None

        service = await client.get_service_by_name(1, "KAFKA")
        assert service.id == 10 and service.cluster_id == 1
        assert await client.get_service_by_name(1, "STORM") is None

        comps = await client.list_components(10)
        assert comps[0].name == "KAFKA_BROKER"
        assert comps[0].hosts == ["k1"]
        assert await client.list_components(20) == []
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_lookup_over_rest_catalog(aiohttp_server):
    server = await aiohttp_server(create_fake_catalog_app())
    client = RestCatalogClient(str(server.make_url("/api/v1/catalog")))
    try:
        ns = await client.get_namespace(1)
        services = await lookup.services_for_namespace(client, ns, "KAFKA")
        assert [s.id for s in services] == [10, 20]

        broker = await lookup.component(client, services[0], "KAFKA_BROKER")
        assert broker.port == 6667
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_null_entities_is_absent_not_empty(aiohttp_server):
    server = await aiohttp_server(create_fake_catalog_app())
    client = RestCatalogClient(str(server.make_url("/api/v1/catalog")))
    try:
        assert await client.list_service_cluster_mapping(1, "HBASE") is None
        assert await client.list_service_cluster_mapping(1, "HDFS") == []
    finally:
        await client.close()


def create_flaky_cluster_app(statuses):
    calls = []

    async def get_cluster(request):
        calls.append(request.match_info["id"])
        status = statuses[len(calls) - 1] if len(calls) <= len(statuses) else 200
        if status != 200:
            return web.Response(status=status, text="unavailable")
        return web.json_response({"id": int(request.match_info["id"]), "name": "east"})

    app = web.Application()
    app.router.add_get("/api/v1/catalog/clusters/{id}", get_cluster)
    return app, calls


@pytest.mark.asyncio
async def test_server_errors_are_retried(aiohttp_server, monkeypatch):
    monkeypatch.setattr(RestCatalogClient._get_json.retry, "wait", wait_none())
    app, calls = create_flaky_cluster_app([503, 503])
    server = await aiohttp_server(app)
    client = RestCatalogClient(str(server.make_url("/api/v1/catalog")))
    try:
        cluster = await client.get_cluster(1)
    finally:
        await client.close()

    assert cluster.name == "east"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_server_errors_propagate_after_three_attempts(aiohttp_server, monkeypatch):
    monkeypatch.setattr(RestCatalogClient._get_json.retry, "wait", wait_none())
    app, calls = create_flaky_cluster_app([500, 500, 500, 500])
    server = await aiohttp_server(app)
    client = RestCatalogClient(str(server.make_url("/api/v1/catalog")))
    try:
        with pytest.raises(aiohttp.ClientResponseError) as exc:
            await client.get_cluster(1)
    finally:
        await client.close()

    assert exc.value.status == 500
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_client_errors_are_not_retried(aiohttp_server, monkeypatch):
    monkeypatch.setattr(RestCatalogClient._get_json.retry, "wait", wait_none())
    app, calls = create_flaky_cluster_app([403])
    server = await aiohttp_server(app)
    client = RestCatalogClient(str(server.make_url("/api/v1/catalog")))
    try:
        with pytest.raises(aiohttp.ClientResponseError) as exc:
            await client.get_cluster(1)
    finally:
        await client.close()

    assert exc.value.status == 403
    assert len(calls) == 1
