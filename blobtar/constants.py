from enum import IntEnum


BLOCK_SIZE = 512
HEADER_SIZE = 500

# 11 octal digits, so the 12-byte mtime field keeps its NUL terminator
MAX_TIMESTAMP = 0o77777777777

TAR_MEDIA_TYPE = "application/x-tar"


class TarEntryType(IntEnum):
    FILE = 0
    LINK = 1
    SYMLINK = 2
    CHARDEV = 3
    BLOCKDEV = 4
    DIRECTORY = 5
    FIFO = 6


DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o775
DEFAULT_UID = 0
DEFAULT_GID = 0
DEFAULT_UNAME = ""
DEFAULT_GNAME = ""
