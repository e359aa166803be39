from .TarArchive import TarArchive
from .TarArchiveOpts import TarFileOpts, TarLinkOpts, TarDirectoryOpts, TarDeviceOpts, TarFIFOOpts
from .TarBlockReader import TarBlockReader, TarReaderState, MalformedArchiveError
from .TarEntry import TarEntry

__all__ = [
    "TarArchive",
    "TarFileOpts",
    "TarLinkOpts",
    "TarDirectoryOpts",
    "TarDeviceOpts",
    "TarFIFOOpts",
    "TarBlockReader",
    "TarReaderState",
    "MalformedArchiveError",
    "TarEntry",
]
