"""Lockfile codec."""

from bpm.lockfile.io import (
    LOCKFILE_NAME,
    decode_lockfile,
    encode_lockfile,
    find_lockfile_dir,
    load_lockfile,
    save_lockfile,
)

__all__ = [
    "LOCKFILE_NAME",
    "decode_lockfile",
    "encode_lockfile",
    "find_lockfile_dir",
    "load_lockfile",
    "save_lockfile",
]
