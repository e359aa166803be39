from typing import Union
from dataclasses import dataclass
from ..constants import DEFAULT_DIR_MODE, DEFAULT_FILE_MODE, DEFAULT_GID, DEFAULT_GNAME, DEFAULT_UID, DEFAULT_UNAME


@dataclass(frozen=True)
class TarPermissionOpts:
    """
    Ownership and permission options shared by all entry kinds.

    Attributes:
        mode (int): Permission bits. Default is 0o644 (0o775 for directories).
        uid (int): Owner user id. Default is 0.
        gid (int): Owner group id. Default is 0.
        uname (str): Owner user name. Default is empty.
        gname (str): Owner group name. Default is empty.
        last_modified (Union[float, None]): Modification time in milliseconds
        since the epoch. If None, the current time is used; for files added
        from a TarContent, the content's own timestamp is used.
    """
    mode: int = DEFAULT_FILE_MODE
    uid: int = DEFAULT_UID
    gid: int = DEFAULT_GID
    uname: str = DEFAULT_UNAME
    gname: str = DEFAULT_GNAME
    last_modified: Union[float, None] = None


@dataclass(frozen=True)
class TarFileOpts(TarPermissionOpts):
    pass


@dataclass(frozen=True)
class TarLinkOpts(TarPermissionOpts):
    pass


@dataclass(frozen=True)
class TarDirectoryOpts(TarPermissionOpts):
    mode: int = DEFAULT_DIR_MODE


@dataclass(frozen=True)
class TarDeviceOpts(TarPermissionOpts):
    pass


@dataclass(frozen=True)
class TarFIFOOpts(TarPermissionOpts):
    pass
