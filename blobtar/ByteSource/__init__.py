from .ByteSource import ByteSource, BytesByteSource, LocalFileByteSource
from .RemoteByteSource import RemoteByteSource
from .TarContent import TarContent

__all__ = [
    "ByteSource",
    "BytesByteSource",
    "LocalFileByteSource",
    "RemoteByteSource",
    "TarContent",
]
