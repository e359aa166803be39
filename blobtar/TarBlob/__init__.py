from .TarBlob import TarBlob

__all__ = [
    "TarBlob",
]
