from relay_server.http.app import create_app

__all__ = ["create_app"]
