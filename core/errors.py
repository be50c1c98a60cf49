"""Error hierarchy shared by the container, the lookup helpers and the factory."""


class ContainerError(Exception):
    """Base class for every error raised by this package."""


class CatalogResolutionError(ContainerError):
    """A namespace/service/component could not be resolved against the catalog."""

    SERVICE_NOT_CONFIGURED = "service_not_configured"
    CLUSTER_NOT_FOUND = "cluster_not_found"
    SERVICE_NOT_FOUND = "service_not_found"
    COMPONENT_NOT_FOUND = "component_not_found"
    INCOMPLETE_HOST_PORT = "incomplete_host_port"

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class InstantiationError(ContainerError):
    """A plug-in instance could not be created by name."""

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name


class InstanceNotFoundError(InstantiationError):
    pass


class InstanceAccessError(InstantiationError):
    pass


class InstanceConstructionError(InstantiationError):
    pass
