from .register_routes import build_auth_router

__all__ = ["build_auth_router"]
