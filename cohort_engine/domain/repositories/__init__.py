from .response_store import IResponseStore

__all__ = ["IResponseStore"]
