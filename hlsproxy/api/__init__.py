from .proxy import router

__all__ = ["router"]
