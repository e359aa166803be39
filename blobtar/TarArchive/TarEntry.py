from typing import Union
from dataclasses import dataclass
from ..TarHeader.TarHeader import TarHeader
from ..ByteSource.TarContent import TarContent


@dataclass
class TarEntry:
    """An archived object: its header and, for regular files, its content."""
    header: TarHeader
    content: Union[TarContent, None] = None

    @property
    def path(self) -> str:
        return self.header.path

    def read(self) -> bytes:
        if self.content is None:
            return b""
        return self.content.read()
