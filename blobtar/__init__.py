from .constants import TarEntryType, BLOCK_SIZE
from .conversion.path_utils import PathTooLongError
from .TarHeader import TarHeader
from .ByteSource import ByteSource, BytesByteSource, LocalFileByteSource, RemoteByteSource, TarContent
from .TarBlob import TarBlob
from .TarArchive import (
    TarArchive,
    TarEntry,
    TarFileOpts,
    TarLinkOpts,
    TarDirectoryOpts,
    TarDeviceOpts,
    TarFIFOOpts,
    MalformedArchiveError,
)

__all__ = [
    "TarEntryType",
    "BLOCK_SIZE",
    "PathTooLongError",
    "TarHeader",
    "ByteSource",
    "BytesByteSource",
    "LocalFileByteSource",
    "RemoteByteSource",
    "TarContent",
    "TarBlob",
    "TarArchive",
    "TarEntry",
    "TarFileOpts",
    "TarLinkOpts",
    "TarDirectoryOpts",
    "TarDeviceOpts",
    "TarFIFOOpts",
    "MalformedArchiveError",
]
