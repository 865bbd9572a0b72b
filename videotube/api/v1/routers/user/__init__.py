from .channels import router as channels_router
from .me import router as me_router

__all__ = ["me_router", "channels_router"]
