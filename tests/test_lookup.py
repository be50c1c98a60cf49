import pytest

from catalog import lookup
from catalog.memory import InMemoryCatalog
from core.entities import Component, Namespace, NamespaceServiceClusterMapping, Service
from core.errors import CatalogResolutionError

NS = Namespace(1, "prod")


def make_catalog():
    return InMemoryCatalog(
        {
            "namespaces": [{"id": 1, "name": "prod"}],
            "clusters": [{"id": 1, "name": "east"}, {"id": 2, "name": "west"}],
            "services": [
                {"id": 10, "cluster_id": 1, "name": "KAFKA"},
                {"id": 20, "cluster_id": 2, "name": "KAFKA"},
            ],
            "components": [
                {"id": 100, "service_id": 10, "name": "BROKER", "hosts": ["h1"], "port": 9092},
                {"id": 101, "service_id": 10, "name": "ZK", "hosts": ["z1"], "port": 2181},
                {"id": 102, "service_id": 10, "name": "BROKER", "hosts": ["h2"], "port": 9093},
            ],
            "mappings": [
                {"namespace_id": 1, "service_name": "KAFKA", "cluster_id": 1},
                {"namespace_id": 1, "service_name": "KAFKA", "cluster_id": 2},
            ],
        }
    )


@pytest.mark.asyncio
async def test_services_resolved_in_mapping_order():
    catalog = make_catalog()

    services = await lookup.services_for_namespace(catalog, NS, "KAFKA")
    assert [s.id for s in services] == [10, 20]
    assert [s.cluster_id for s in services] == [1, 2]

    first = await lookup.first_service_for_namespace(catalog, NS, "KAFKA")
    assert first.id == 10


@pytest.mark.asyncio
async def test_unconfigured_service_raises():
    catalog = make_catalog()

    with pytest.raises(CatalogResolutionError, match="not set in namespace prod\\(1\\)") as exc:
        await lookup.services_for_namespace(catalog, NS, "STORM")
    assert exc.value.reason == CatalogResolutionError.SERVICE_NOT_CONFIGURED


@pytest.mark.asyncio
async def test_empty_mapping_list_is_not_an_error():
    catalog = make_catalog()
    catalog.mappings[(1, "STORM")] = []

    assert await lookup.services_for_namespace(catalog, NS, "STORM") == []
    assert await lookup.first_service_for_namespace(catalog, NS, "STORM") is None


@pytest.mark.asyncio
async def test_missing_cluster_raises():
    catalog = make_catalog()
    catalog.add_mapping(NamespaceServiceClusterMapping(1, "KAFKA", 99))

    with pytest.raises(CatalogResolutionError, match="Cluster 99 is not found") as exc:
        await lookup.services_for_namespace(catalog, NS, "KAFKA")
    assert exc.value.reason == CatalogResolutionError.CLUSTER_NOT_FOUND


@pytest.mark.asyncio
async def test_missing_service_in_cluster_raises():
    catalog = make_catalog()
    catalog.add_mapping(NamespaceServiceClusterMapping(1, "HBASE", 2))

    with pytest.raises(CatalogResolutionError, match="HBASE is not found in Cluster 2") as exc:
        await lookup.services_for_namespace(catalog, NS, "HBASE")
    assert exc.value.reason == CatalogResolutionError.SERVICE_NOT_FOUND


@pytest.mark.asyncio
async def test_component_returns_first_exact_match():
    catalog = make_catalog()
    service = Service(10, "KAFKA", 1)

    broker = await lookup.component(catalog, service, "BROKER")
    assert broker.id == 100

    with pytest.raises(CatalogResolutionError, match="KAFKA doesn't have NIMBUS as component") as exc:
        await lookup.component(catalog, service, "NIMBUS")
    assert exc.value.reason == CatalogResolutionError.COMPONENT_NOT_FOUND

    with pytest.raises(CatalogResolutionError):
        await lookup.component(catalog, service, "broker")


@pytest.mark.parametrize(
    "host,port",
    [("", 9092), (None, 9092), ("h", None)],
)
def test_assert_host_and_port_rejects_incomplete(host, port):
    with pytest.raises(CatalogResolutionError, match="X component doesn't have enough information") as exc:
        lookup.assert_host_and_port("X", host, port)
    assert exc.value.reason == CatalogResolutionError.INCOMPLETE_HOST_PORT


def test_assert_host_and_port_accepts_complete():
    lookup.assert_host_and_port("X", "h", 9092)
    lookup.assert_hosts_and_port("X", ["h1", "h2"], 9092)


@pytest.mark.parametrize(
    "hosts,port",
    [([], 9092), (None, 9092), (["h"], None)],
)
def test_assert_hosts_and_port_rejects_incomplete(hosts, port):
    with pytest.raises(CatalogResolutionError, match="hosts:"):
        lookup.assert_hosts_and_port("X", hosts, port)


def test_component_from_rest_payload():
    comp = Component.from_dict(
        {"id": "5", "serviceId": 10, "name": "NIMBUS", "hosts": ["n1"], "port": "6627", "protocol": None}
    )
    assert comp.service_id == 10
    assert comp.port == 6627
    assert comp.hosts == ["n1"]
