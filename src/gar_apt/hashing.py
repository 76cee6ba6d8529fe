"""Hashing utilities for downloaded files.

apt verifies the MD5-Hash reported in 201 URI Done against the file it
receives, so the digest is computed while the bytes are written.
"""

import hashlib
import os
import tempfile
from pathlib import Path
from typing import Iterable, Tuple, Union


def copy_and_hash(chunks: Iterable[bytes], dest: Union[str, Path]) -> Tuple[str, int]:
    """Write `chunks` to `dest`, returning its MD5 and size.

    The bytes go to a temp file beside `dest` that is renamed into place
    once every chunk is written. If reading or writing fails, `dest` is
    left as it was and the temp file is removed.

    Args:
        chunks: Byte chunks in file order (empty chunks are skipped)
        dest: Target file path

    Returns:
        Tuple of (lowercase hex MD5 digest, number of bytes written)
    """
    dest = Path(dest)
    md5 = hashlib.md5()
    size = 0
    with tempfile.NamedTemporaryFile(
        dir=dest.parent,
        prefix=f".{dest.name}.tmp-",
        delete=False,
    ) as f:
        tmp = Path(f.name)

    try:
        with open(tmp, "wb") as out:
            for chunk in chunks:
                if not chunk:
                    continue
                md5.update(chunk)
                out.write(chunk)
                size += len(chunk)
        os.replace(tmp, dest)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return md5.hexdigest(), size


__all__ = ["copy_and_hash"]
