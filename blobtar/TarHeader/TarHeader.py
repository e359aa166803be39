from typing import Union
from dataclasses import dataclass, replace
import math
from ..constants import BLOCK_SIZE, HEADER_SIZE, MAX_TIMESTAMP, TarEntryType
from ..conversion.byte_fields import decode_octal, decode_string, write_octal, write_string
from ..conversion.checksum import generate_checksum, CHECKSUM_PRECISION
from ..conversion.path_utils import decode_path, encode_path


USTAR_MAGIC = "ustar"


@dataclass
class TarHeader:
    """
    A USTAR header record.

    Attributes:
        name (str): The last (up to) 100 characters of the entry path.
        mode (int): Permission bits.
        uid (int): Owner user id.
        gid (int): Owner group id.
        size (int): Content length in bytes, 0 for anything but regular files.
        last_modified (int): Modification time in whole seconds since the epoch.
        checksum (int): Header checksum.
        typeflag (int): Entry kind, see TarEntryType.
        linkname (str): Link target for hard and symbolic links.
        version (int): USTAR version, written as "00".
        uname (str): Owner user name.
        gname (str): Owner group name.
        devmajor (Union[int, None]): Device major number, None for non-devices.
        devminor (Union[int, None]): Device minor number, None for non-devices.
        prefix (str): The part of the path that did not fit in name.
    """
    name: str
    mode: int
    uid: int
    gid: int
    size: int
    last_modified: int
    checksum: int
    typeflag: int
    linkname: str
    version: int
    uname: str
    gname: str
    devmajor: Union[int, None]
    devminor: Union[int, None]
    prefix: str

    @property
    def path(self) -> str:
        # join the raw bytes so a character split between the fields survives
        return decode_path(encode_path(self.prefix + self.name))

    @property
    def entry_type(self) -> Union[TarEntryType, None]:
        try:
            return TarEntryType(self.typeflag)
        except ValueError:
            return None

    @property
    def num_content_blocks(self) -> int:
        return math.ceil(self.size / BLOCK_SIZE)

    def copy(self) -> "TarHeader":
        return replace(self)

    def to_bytes(self, *, recompute_checksum: bool = False) -> bytes:
        """
        Serialize into a single zero-padded 512-byte block.

        With recompute_checksum, the stored checksum is replaced by one computed
        over the written block. Headers read from an archive keep their on-disk
        checksum, which no longer matches once the magic and version are
        rewritten (e.g. a GNU "ustar  " header).
        """
        block = bytearray(BLOCK_SIZE)
        write_header(self, block)
        if recompute_checksum:
            checksum = generate_checksum(block[:HEADER_SIZE], CHECKSUM_PRECISION)
            write_octal(checksum, block, 148, 7)
            block[155] = 0x20
        return bytes(block)


def tar_header(
    name: str,
    mode: int,
    uid: int,
    gid: int,
    size: int,
    last_modified: float,
    checksum: Union[int, None],
    typeflag: int,
    linkname: str,
    version: int,
    uname: str,
    gname: str,
    devmajor: Union[int, None],
    devminor: Union[int, None],
    prefix: str
) -> TarHeader:
    """
    Build a header. last_modified is given in milliseconds and stored in
    seconds. When checksum is None it is computed from the serialized fields.
    """
    last_modified_sec = int(last_modified // 1000)
    if last_modified_sec > MAX_TIMESTAMP:
        last_modified_sec = MAX_TIMESTAMP
    if last_modified_sec < 0:
        last_modified_sec = 0

    header = TarHeader(
        name=name,
        mode=mode,
        uid=uid,
        gid=gid,
        size=size,
        last_modified=last_modified_sec,
        checksum=checksum if checksum is not None else 0,
        typeflag=typeflag,
        linkname=linkname,
        version=version,
        uname=uname,
        gname=gname,
        devmajor=devmajor,
        devminor=devminor,
        prefix=prefix
    )

    if checksum is None:
        scratch = bytearray(HEADER_SIZE)
        write_header(header, scratch)
        header.checksum = generate_checksum(scratch, CHECKSUM_PRECISION)

    return header


def write_header(header: TarHeader, output, offset: int = 0) -> None:
    output = memoryview(output)[offset:offset + HEADER_SIZE]
    write_string(header.name, output, 0, 100)
    write_octal(header.mode, output, 100, 8)
    write_octal(header.uid, output, 108, 8)
    write_octal(header.gid, output, 116, 8)
    write_octal(header.size, output, 124, 12)
    write_octal(header.last_modified, output, 136, 12)
    write_octal(header.checksum, output, 148, 7)
    output[155] = 0x20
    write_octal(header.typeflag, output, 156, 1)
    write_string(header.linkname, output, 157, 100)
    write_string(USTAR_MAGIC, output, 257, 6)
    write_octal(header.version & 0o77, output, 263, 3)
    # uname starts on the last byte of the version field
    write_string(header.uname, output, 265, 32)
    write_string(header.gname, output, 297, 32)
    if header.devmajor is None:
        output[329:337] = b"\x00" * 8
    else:
        write_octal(header.devmajor, output, 329, 8)
    if header.devminor is None:
        output[337:345] = b"\x00" * 8
    else:
        write_octal(header.devminor, output, 337, 8)
    write_string(header.prefix, output, 345, 155)


def read_header(block: bytes) -> TarHeader:
    """Decode the fields of a header block. The stored checksum is kept as is."""
    return TarHeader(
        name=decode_string(block, 0, 100),
        mode=decode_octal(block, 100, 8),
        uid=decode_octal(block, 108, 8),
        gid=decode_octal(block, 116, 8),
        size=decode_octal(block, 124, 12),
        last_modified=decode_octal(block, 136, 12),
        checksum=decode_octal(block, 148, 8),
        typeflag=decode_octal(block, 156, 1),
        linkname=decode_string(block, 157, 100),
        version=decode_octal(block, 263, 2),
        uname=decode_string(block, 265, 32),
        gname=decode_string(block, 297, 32),
        devmajor=decode_octal(block, 329, 8),
        devminor=decode_octal(block, 337, 8),
        prefix=decode_string(block, 345, 155)
    )
