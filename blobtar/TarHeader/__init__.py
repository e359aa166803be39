from .TarHeader import TarHeader, tar_header, write_header, read_header

__all__ = [
    "TarHeader",
    "tar_header",
    "write_header",
    "read_header",
]
