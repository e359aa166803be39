from typing import Dict, Iterator, List, Union
import time
from ..constants import BLOCK_SIZE, TarEntryType
from ..conversion.path_utils import encode_path, normalize_path, split_filename, MAX_NAME_LENGTH
from ..ByteSource.ByteSource import ByteSource, BytesByteSource, LocalFileByteSource, as_byte_source
from ..ByteSource.RemoteByteSource import RemoteByteSource
from ..ByteSource.TarContent import TarContent
from ..TarBlob.TarBlob import TarBlob
from ..TarHeader.TarHeader import tar_header
from .TarArchiveOpts import TarDeviceOpts, TarDirectoryOpts, TarFIFOOpts, TarFileOpts, TarLinkOpts, TarPermissionOpts
from .TarBlockReader import TarBlockReader
from .TarEntry import TarEntry


class TarArchive:
    """
    An in-memory tar archive: an ordered list of entries.

    Entries are appended with the add_* methods or read from a byte source with
    from_source(). Paths may repeat; trim() keeps only the last entry for each
    path. The archive is serialized with to_blob().
    """
    def __init__(self):
        self._entries: List[TarEntry] = []
        # path -> index of the most recent entry with that path. A missing
        # path falls back to a scan in index_of().
        self._index_map: Dict[str, int] = {}

    def add_file(self, path: str, content: Union[TarContent, bytes, bytearray, memoryview], opts: Union[TarFileOpts, None] = None) -> None:
        """
        Append a regular file entry.

        Parameters
        ----------
        path : str
            The path of the file in the archive.
        content : TarContent or bytes
            The file content. Raw bytes are timestamped with opts.last_modified
            (or now); a TarContent carries its own timestamp.
        opts : TarFileOpts, optional
            Permission and ownership options.
        """
        if opts is None:
            opts = TarFileOpts()
        path = normalize_path(path)
        if not isinstance(content, TarContent):
            content = TarContent.from_bytes(content, name=path, last_modified=opts.last_modified)
        self._append(
            path,
            TarEntryType.FILE,
            opts,
            size=content.size,
            last_modified=content.last_modified,
            content=content
        )

    def _add_link(self, typeflag: TarEntryType, path: str, target: str, opts: Union[TarLinkOpts, None]) -> None:
        if opts is None:
            opts = TarLinkOpts()
        path = normalize_path(path)
        trailing_sep = target.endswith("/")
        target = normalize_path(target)
        if trailing_sep:
            target += "/"
        if len(encode_path(target)) > MAX_NAME_LENGTH:
            raise ValueError(f"Link target is too long: {len(encode_path(target))} > {MAX_NAME_LENGTH} bytes")
        self._append(path, typeflag, opts, linkname=target)

    def add_hardlink(self, path: str, target: str, opts: Union[TarLinkOpts, None] = None) -> None:
        """Append a hard link entry pointing at target."""
        self._add_link(TarEntryType.LINK, path, target, opts)

    def add_symlink(self, path: str, target: str, opts: Union[TarLinkOpts, None] = None) -> None:
        """Append a symbolic link entry pointing at target."""
        self._add_link(TarEntryType.SYMLINK, path, target, opts)

    def add_dir(self, path: str, opts: Union[TarDirectoryOpts, None] = None) -> None:
        """Append a directory entry. The stored path ends with '/'."""
        if opts is None:
            opts = TarDirectoryOpts()
        path = normalize_path(path) + "/"
        self._append(path, TarEntryType.DIRECTORY, opts)

    def _add_device(self, typeflag: TarEntryType, path: str, major_id: int, minor_id: int, opts: Union[TarDeviceOpts, None]) -> None:
        if major_id < 0 or minor_id < 0:
            raise ValueError(f"Invalid device id: {major_id}:{minor_id}")
        if opts is None:
            opts = TarDeviceOpts()
        path = normalize_path(path)
        self._append(path, typeflag, opts, devmajor=major_id, devminor=minor_id)

    def add_char_device(self, path: str, major_id: int, minor_id: int, opts: Union[TarDeviceOpts, None] = None) -> None:
        """Append a character device entry with the given device id."""
        self._add_device(TarEntryType.CHARDEV, path, major_id, minor_id, opts)

    def add_block_device(self, path: str, major_id: int, minor_id: int, opts: Union[TarDeviceOpts, None] = None) -> None:
        """Append a block device entry with the given device id."""
        self._add_device(TarEntryType.BLOCKDEV, path, major_id, minor_id, opts)

    def add_fifo(self, path: str, opts: Union[TarFIFOOpts, None] = None) -> None:
        """Append a FIFO (named pipe) entry."""
        if opts is None:
            opts = TarFIFOOpts()
        path = normalize_path(path)
        self._append(path, TarEntryType.FIFO, opts)

    def _append(
        self,
        path: str,
        typeflag: TarEntryType,
        opts: TarPermissionOpts,
        *,
        size: int = 0,
        last_modified: Union[float, None] = None,
        linkname: str = "",
        devmajor: Union[int, None] = None,
        devminor: Union[int, None] = None,
        content: Union[TarContent, None] = None
    ) -> None:
        name, prefix = split_filename(path)
        if last_modified is None:
            last_modified = opts.last_modified
        if last_modified is None:
            last_modified = time.time() * 1000
        header = tar_header(
            name,
            opts.mode,
            opts.uid,
            opts.gid,
            size,
            last_modified,
            None,
            int(typeflag),
            linkname,
            0,
            opts.uname,
            opts.gname,
            devmajor,
            devminor,
            prefix
        )
        self._index_map[path] = len(self._entries)
        self._entries.append(TarEntry(header=header, content=content))

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[TarEntry]:
        return self.entries()

    def entries(self) -> Iterator[TarEntry]:
        for i in range(len(self._entries)):
            entry = self.entry_at(i)
            assert entry is not None
            yield entry

    def entry_at(self, index: int) -> Union[TarEntry, None]:
        """The entry at index with a copy of its header, or None if out of range."""
        if index < 0 or index >= len(self._entries):
            return None
        entry = self._entries[index]
        return TarEntry(header=entry.header.copy(), content=entry.content)

    def index_of(self, path: str) -> int:
        """The index of the last entry with the given path, or -1."""
        mapped_index = self._index_map.get(path, None)
        if mapped_index is not None:
            return mapped_index
        for i in range(len(self._entries) - 1, -1, -1):
            if self._entries[i].header.path == path:
                self._index_map[path] = i
                return i
        return -1

    def remove_at(self, index: int) -> None:
        """Remove the entry at index. Out of range indices are ignored."""
        if index < 0 or index >= len(self._entries):
            return
        self._entries.pop(index)
        new_index_map = {}
        for path, i in self._index_map.items():
            if i < index:
                new_index_map[path] = i
            elif i > index:
                new_index_map[path] = i - 1
        # an earlier entry with the removed path is found again by index_of()
        self._index_map = new_index_map

    def remove_entry(self, path: str) -> None:
        """Remove every entry with the given path."""
        start = self._index_map.get(path, len(self._entries) - 1)
        for i in range(start, -1, -1):
            if self._entries[i].header.path == path:
                self.remove_at(i)

    def trim(self) -> None:
        """Remove duplicate paths, keeping the last entry written for each."""
        seen = set()
        kept = []
        for entry in reversed(self._entries):
            path = entry.header.path
            if path in seen:
                continue
            seen.add(path)
            kept.append(entry)
        kept.reverse()
        self._entries = kept
        self._index_map = {entry.header.path: i for i, entry in enumerate(self._entries)}

    def to_blob(self) -> TarBlob:
        """Serialize the archive: header blocks, padded contents and the end marker."""
        parts = []
        for entry in self._entries:
            # headers read from an archive may carry a checksum for different magic bytes
            parts.append(entry.header.to_bytes(recompute_checksum=True))
            if entry.content is not None:
                parts.append(entry.content)
                overflow = entry.content.size % BLOCK_SIZE
                if overflow > 0:
                    parts.append(b"\x00" * (BLOCK_SIZE - overflow))
        parts.append(b"\x00" * (2 * BLOCK_SIZE))
        return TarBlob(parts)

    def to_bytes(self) -> bytes:
        return self.to_blob().to_bytes()

    def save(self, path: str) -> None:
        self.to_blob().save(path)

    @staticmethod
    def from_source(source: Union[ByteSource, bytes, bytearray, memoryview], *, verbose: bool = False) -> "TarArchive":
        """
        Read an archive from a byte source.

        Raises MalformedArchiveError if an entry's content extends past the end
        of the source. Entry contents reference the source rather than copies
        of its bytes.
        """
        source = as_byte_source(source)
        reader = TarBlockReader(source)
        result = TarArchive()
        for entry in reader:
            if verbose:
                print(f"Read entry {entry.header.path} ({entry.header.size} bytes) at block {reader.block_index}")
            result._index_map[entry.header.path] = len(result._entries)
            result._entries.append(entry)
        if verbose:
            print(f"End of archive at block {reader.block_index}: {len(result._entries)} entries")
        return result

    @staticmethod
    def from_bytes(data: Union[bytes, bytearray, memoryview], *, verbose: bool = False) -> "TarArchive":
        return TarArchive.from_source(BytesByteSource(data), verbose=verbose)

    @staticmethod
    def from_file(path: str, *, verbose: bool = False) -> "TarArchive":
        return TarArchive.from_source(LocalFileByteSource(path), verbose=verbose)

    @staticmethod
    def from_url(url: str, *, verbose: bool = False) -> "TarArchive":
        """Read a remote archive. Contents are loaded lazily with range requests."""
        return TarArchive.from_source(RemoteByteSource(url, verbose=verbose), verbose=verbose)
