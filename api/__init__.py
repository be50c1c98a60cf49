from api.admin_server import AdminServer, create_admin_app

__all__ = ["AdminServer", "create_admin_app"]
