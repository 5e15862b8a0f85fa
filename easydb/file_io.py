from __future__ import annotations

import os
import tempfile
from pathlib import Path

TMP_SUFFIX = ".tmp"


def read_bytes(path: Path) -> tuple[bytes, os.stat_result]:
    """
    Read a file and stat the same open handle.

    Raises FileNotFoundError for missing files; callers decide whether that is
    an error.
    """
    with path.open("rb") as f:
        st = os.fstat(f.fileno())
        return f.read(), st


def atomic_write_bytes(path: Path, payload: bytes) -> os.stat_result:
    """
    Atomically write bytes to disk by writing to a temp file then replacing.

    The parent directory must already exist. The temp file gets a short
    dotted name of its own, so any name the filesystem accepts for `path`
    can be written. Returns the stat of the new file.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=TMP_SUFFIX)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return path.stat()


def advance_mtime(path: Path, after_ns: int) -> os.stat_result:
    """
    Push `path`'s mtime past `after_ns` if the filesystem clock has not.

    File timestamps come from a coarse clock, so two quick writes can share an
    mtime. Larger steps cover filesystems that truncate timestamps.
    """
    st = path.stat()
    for step_ns in (1_000, 1_000_000, 1_000_000_000, 2_000_000_000):
        if st.st_mtime_ns > after_ns:
            break
        os.utime(path, ns=(st.st_atime_ns, after_ns + step_ns))
        st = path.stat()
    return st
