import pytest
import blobtar
from blobtar import (
    TarArchive,
    TarContent,
    TarEntryType,
    TarFileOpts,
    TarDirectoryOpts,
    TarLinkOpts,
    TarDeviceOpts,
    PathTooLongError,
)


def test_add_file():
    archive = TarArchive()
    archive.add_file('a/b.txt', b'hello')
    assert len(archive) == 1
    entry = archive.entry_at(0)
    assert isinstance(entry, blobtar.TarEntry)
    assert entry.path == 'a/b.txt'
    assert entry.header.size == 5
    assert entry.header.typeflag == TarEntryType.FILE
    assert entry.header.mode == 0o644
    assert entry.header.uid == 0
    assert entry.header.gid == 0
    assert entry.header.uname == ''
    assert entry.header.devmajor is None
    assert entry.read() == b'hello'


def test_add_file_normalizes_path():
    archive = TarArchive()
    archive.add_file('./a//x/../b.txt', b'')
    entry = archive.entry_at(0)
    assert entry is not None
    assert entry.path == 'a/b.txt'
    assert entry.content is not None
    assert entry.content.name == 'a/b.txt'


def test_add_file_options():
    archive = TarArchive()
    opts = TarFileOpts(mode=0o600, uid=1000, gid=100, uname='alice', gname='staff', last_modified=1_600_000_000_000)
    archive.add_file('f', b'abc', opts)
    h = archive.entry_at(0).header  # type: ignore
    assert h.mode == 0o600
    assert h.uid == 1000
    assert h.gid == 100
    assert h.uname == 'alice'
    assert h.gname == 'staff'
    assert h.last_modified == 1_600_000_000


def test_add_file_from_content():
    archive = TarArchive()
    content = TarContent.from_bytes(b'xyz', last_modified=5000)
    archive.add_file('c.bin', content)
    entry = archive.entry_at(0)
    assert entry is not None
    assert entry.header.last_modified == 5
    assert entry.content is content
    assert entry.read() == b'xyz'


def test_add_dir():
    archive = TarArchive()
    archive.add_dir('x/y/')
    archive.add_dir('z', TarDirectoryOpts(uid=5))
    e0 = archive.entry_at(0)
    e1 = archive.entry_at(1)
    assert e0 is not None and e1 is not None
    assert e0.path == 'x/y/'
    assert e0.header.typeflag == TarEntryType.DIRECTORY
    assert e0.header.mode == 0o775
    assert e0.header.size == 0
    assert e0.content is None
    assert e1.path == 'z/'
    assert e1.header.uid == 5
    assert e1.header.mode == 0o775


def test_add_links():
    archive = TarArchive()
    archive.add_symlink('lnk', './a/../b/')
    archive.add_hardlink('hard', 'a//b', TarLinkOpts(mode=0o777))
    sym = archive.entry_at(0)
    hard = archive.entry_at(1)
    assert sym is not None and hard is not None
    assert sym.header.typeflag == TarEntryType.SYMLINK
    assert sym.header.linkname == 'b/'
    assert sym.header.size == 0
    assert hard.header.typeflag == TarEntryType.LINK
    assert hard.header.linkname == 'a/b'
    assert hard.header.mode == 0o777


def test_add_devices_and_fifo():
    archive = TarArchive()
    archive.add_char_device('dev/null', 1, 3)
    archive.add_block_device('dev/sda', 8, 0, TarDeviceOpts(mode=0o660))
    archive.add_fifo('pipe')
    chardev, blockdev, fifo = list(archive)
    assert chardev.header.typeflag == TarEntryType.CHARDEV
    assert (chardev.header.devmajor, chardev.header.devminor) == (1, 3)
    assert blockdev.header.typeflag == TarEntryType.BLOCKDEV
    assert (blockdev.header.devmajor, blockdev.header.devminor) == (8, 0)
    assert blockdev.header.mode == 0o660
    assert fifo.header.typeflag == TarEntryType.FIFO
    assert fifo.header.devmajor is None
    assert fifo.header.devminor is None
    assert fifo.header.linkname == ''
    with pytest.raises(ValueError):
        archive.add_char_device('bad', -1, 0)


def test_long_path():
    archive = TarArchive()
    path = 'd' * 49 + '/' + 'f' * 100
    archive.add_file(path, b'')
    h = archive.entry_at(0).header  # type: ignore
    assert h.name == 'f' * 100
    assert h.prefix == 'd' * 49 + '/'
    assert h.path == path

    with pytest.raises(PathTooLongError):
        archive.add_file('a' * 256, b'')
    with pytest.raises(PathTooLongError):
        archive.add_dir('a' * 255)
    assert len(archive) == 1


def test_entry_at_returns_copy():
    archive = TarArchive()
    archive.add_file('f', b'1')
    entry = archive.entry_at(0)
    assert entry is not None
    entry.header.name = 'changed'
    assert archive.entry_at(0).header.name == 'f'  # type: ignore
    assert archive.entry_at(1) is None
    assert archive.entry_at(-1) is None


def test_index_of():
    archive = TarArchive()
    archive.add_file('a', b'1')
    archive.add_dir('d')
    archive.add_file('a', b'2')
    assert archive.index_of('a') == 2
    assert archive.index_of('d/') == 1
    assert archive.index_of('d') == -1
    assert archive.index_of('missing') == -1


def test_remove_at():
    archive = TarArchive()
    archive.add_file('a', b'1')
    archive.add_dir('d')
    archive.add_file('b', b'2')
    archive.remove_at(0)
    assert len(archive) == 2
    assert archive.index_of('d/') == 0
    assert archive.index_of('b') == 1
    assert archive.index_of('a') == -1

    # out of range is a no-op
    archive.remove_at(5)
    archive.remove_at(-1)
    assert len(archive) == 2


def test_remove_at_falls_back_to_earlier_duplicate():
    archive = TarArchive()
    archive.add_file('a', b'1')
    archive.add_file('b', b'x')
    archive.add_file('a', b'2')
    archive.remove_at(2)
    assert archive.index_of('a') == 0
    assert archive.entry_at(archive.index_of('a')).read() == b'1'  # type: ignore


def test_remove_entry():
    archive = TarArchive()
    archive.add_file('a', b'1')
    archive.add_file('b', b'x')
    archive.add_file('a', b'2')
    archive.add_file('c', b'y')
    archive.remove_entry('a')
    assert [e.path for e in archive] == ['b', 'c']
    assert archive.index_of('a') == -1
    assert archive.index_of('c') == 1
    archive.remove_entry('missing')
    assert len(archive) == 2


def test_trim():
    archive = TarArchive()
    for i, path in enumerate(['a', 'b', 'a', 'c', 'b']):
        archive.add_file(path, str(i).encode())
    archive.trim()
    assert [e.path for e in archive] == ['a', 'c', 'b']
    assert [e.read() for e in archive] == [b'2', b'3', b'4']
    assert archive.index_of('a') == 0
    assert archive.index_of('b') == 2

    # idempotent
    archive.trim()
    assert [e.path for e in archive] == ['a', 'c', 'b']
    assert [e.read() for e in archive] == [b'2', b'3', b'4']


def test_trim_duplicate_dirs():
    archive = TarArchive()
    archive.add_dir('x')
    archive.add_dir('x')
    archive.trim()
    assert len(archive) == 1
    entry = archive.entry_at(0)
    assert entry is not None
    assert entry.path == 'x/'
    assert entry.header.typeflag == TarEntryType.DIRECTORY


def test_iteration_order():
    archive = TarArchive()
    archive.add_dir('d')
    archive.add_file('d/f', b'')
    archive.add_symlink('s', 'd/f')
    assert [e.path for e in archive] == ['d/', 'd/f', 's']
    assert [e.path for e in archive.entries()] == ['d/', 'd/f', 's']


def test_path_limits_in_bytes():
    archive = TarArchive()
    with pytest.raises(PathTooLongError):
        archive.add_file('é' * 200, b'')
    archive.add_file('é' * 60, b'data')
    h = archive.entry_at(0).header  # type: ignore
    assert h.name == 'é' * 50
    assert h.prefix == 'é' * 10
    assert h.path == 'é' * 60
    assert archive.index_of('é' * 60) == 0


def test_link_target_too_long():
    archive = TarArchive()
    with pytest.raises(ValueError):
        archive.add_symlink('lnk', 't' * 101)
    with pytest.raises(ValueError):
        archive.add_hardlink('lnk', 'é' * 51)
    assert len(archive) == 0
    archive.add_symlink('lnk', 't' * 100)
    assert archive.entry_at(0).header.linkname == 't' * 100  # type: ignore


if __name__ == '__main__':
    test_add_file()
    test_add_file_normalizes_path()
    test_add_file_options()
    test_add_file_from_content()
    test_add_dir()
    test_add_links()
    test_add_devices_and_fifo()
    test_long_path()
    test_entry_at_returns_copy()
    test_index_of()
    test_remove_at()
    test_remove_at_falls_back_to_earlier_duplicate()
    test_remove_entry()
    test_trim()
    test_trim_duplicate_dirs()
    test_iteration_order()
    test_path_limits_in_bytes()
    test_link_target_too_long()
