"""Lazy traversal of a source tree.

walk_tree is the single traversal shared by space accounting and encoding.
It yields entries instead of calling back into the consumer, so each consumer
keeps its own intent (summing sizes, streaming into an archive).
"""

import os
import stat
from collections.abc import Iterator
from pathlib import Path

from obsvault.core.types import EntryKind, FileEntry


def _kind(mode: int) -> EntryKind:
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


def _entry(path: Path, root: Path) -> FileEntry:
    st = path.lstat()
    relative = os.path.relpath(path, root)
    return FileEntry(
        path=path,
        relative=Path(relative).as_posix(),
        kind=_kind(st.st_mode),
        size=st.st_size,
        mode=stat.S_IMODE(st.st_mode),
        mtime=st.st_mtime,
    )


def _walk_children(directory: Path, root: Path) -> Iterator[FileEntry]:
    with os.scandir(directory) as it:
        names = sorted(entry.name for entry in it)
    for name in names:
        entry = _entry(directory / name, root)
        yield entry
        if entry.is_dir:
            yield from _walk_children(entry.path, root)


def walk_tree(root: Path | str) -> Iterator[FileEntry]:
    """Yield every entry under root, depth-first, root first.

    Children are visited in name order and each directory is yielded before
    its contents. Symbolic links are reported with kind OTHER and are not
    followed. OSError from stat or listing propagates to the caller.
    """
    base = Path(root).resolve()
    top = _entry(base, base)
    yield top
    if top.is_dir:
        yield from _walk_children(base, base)
