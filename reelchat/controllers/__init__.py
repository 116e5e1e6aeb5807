"""FastAPI routers acting as controllers in the MVC architecture."""

from . import composite, transcription

__all__ = ["composite", "transcription"]
