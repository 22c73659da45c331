"""SHA-256 digest of a generated output tree"""

import hashlib
from pathlib import Path


def tree_digest(root: Path) -> str:
    """Hash every file under root by relative POSIX path and bytes, in sorted order.

    Two trees with identical file names and contents yield the same digest.
    A missing or empty root hashes to the digest of no input.
    """
    h = hashlib.sha256()
    if not root.is_dir():
        return h.hexdigest()
    for p in sorted(p for p in root.rglob('*') if p.is_file()):
        h.update(p.relative_to(root).as_posix().encode("utf-8"))
        h.update(b"\0")
        h.update(p.read_bytes())
        h.update(b"\0")
    return h.hexdigest()
