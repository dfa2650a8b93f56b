"""File-based mailbox for exchanging files with Bill.

Humans upload into ``inbox/``; Bill drops files into ``outbox/`` with an
optional ``<name>.meta`` JSON sidecar holding a description.
"""

import base64
import binascii
import fcntl
import json
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Iterator
from urllib.parse import quote

from .config import MAX_UPLOAD_BYTES
from .formatting import now_ms

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta"

CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".json": "application/json",
    ".md": "text/markdown",
    ".csv": "text/csv",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class MailboxError(Exception):
    """Base class for mailbox failures."""


class FileTooLargeError(MailboxError):
    pass


class InvalidFileNameError(MailboxError):
    pass


class OutboxFileNotFoundError(MailboxError):
    pass


def guess_content_type(file_name: str) -> str:
    """Best-effort MIME type from the file extension."""
    return CONTENT_TYPES.get(Path(file_name).suffix.lower(), DEFAULT_CONTENT_TYPE)


def clean_file_name(name: str, strict: bool = False) -> str:
    """Reduce a client-supplied name to a safe basename.

    Args:
        name: The supplied file name, possibly with directories.
        strict: If True, any directory component is an error instead of
            being stripped.

    Raises:
        InvalidFileNameError: For empty, hidden or path-like names.
    """
    base = PurePosixPath(name.replace("\\", "/")).name
    if not base or base.startswith("."):
        raise InvalidFileNameError(f"Invalid file name: {name!r}")
    if strict and base != name:
        raise InvalidFileNameError(f"Invalid file name: {name!r}")
    return base


@dataclass
class StoredFile:
    """Result of writing a file into the mailbox."""

    file_name: str
    size: int
    original_name: str

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "size": self.size,
            "originalName": self.original_name,
        }


@dataclass
class OutboxFile:
    """A file Bill has made available for download."""

    name: str
    size: int
    created: datetime
    description: str | None = None

    @property
    def url(self) -> str:
        return f"/api/outbox/download/{quote(self.name)}"

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "url": self.url,
            "size": self.size,
            "created": self.created.isoformat(),
        }
        if self.description is not None:
            data["description"] = self.description
        return data


def decode_content(content: str, encoding: str | None = None) -> bytes:
    """Decode outbox content sent as base64 or plain text.

    With no explicit encoding, content that is valid base64 is decoded
    and anything else is taken as UTF-8 text.
    """
    if encoding == "text":
        return content.encode("utf-8")
    try:
        return base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        if encoding == "base64":
            raise MailboxError("Content is not valid base64") from e
        return content.encode("utf-8")


class Mailbox:
    """Directory-backed inbox and outbox with file locking."""

    def __init__(self, root: Path, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        """Initialize the mailbox.

        Args:
            root: Data directory holding ``inbox/`` and ``outbox/``.
            max_upload_bytes: Largest accepted inbox upload.
        """
        self.root = Path(root)
        self.inbox_dir = self.root / "inbox"
        self.outbox_dir = self.root / "outbox"
        self.lock_file = self.root / "mailbox.lock"
        self.max_upload_bytes = max_upload_bytes

    @contextmanager
    def _file_lock(self, exclusive: bool = True) -> Iterator[None]:
        """Acquire a file lock for safe concurrent access.

        Args:
            exclusive: If True, acquire exclusive (write) lock.
                If False, shared (read) lock.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        lock_type = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fd = os.open(str(self.lock_file), os.O_RDWR | os.O_CREAT)
        try:
            fcntl.flock(fd, lock_type)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

    def save_upload(self, original_name: str, data: bytes, timestamp: int | None = None) -> StoredFile:
        """Store an uploaded file in the inbox.

        The stored name is ``<epoch_ms>_<name>``; if that name is taken
        the millisecond prefix is bumped until it is free.

        Raises:
            FileTooLargeError: If the file exceeds ``max_upload_bytes``.
                Nothing is written in that case.
            InvalidFileNameError: If the name is unusable.
        """
        if len(data) > self.max_upload_bytes:
            raise FileTooLargeError(
                f"{original_name} is {len(data)} bytes, limit is {self.max_upload_bytes}"
            )
        base = clean_file_name(original_name)
        prefix = timestamp if timestamp is not None else now_ms()

        with self._file_lock(exclusive=True):
            self.inbox_dir.mkdir(parents=True, exist_ok=True)
            while True:
                file_name = f"{prefix}_{base}"
                path = self.inbox_dir / file_name
                try:
                    with open(path, "xb") as f:
                        f.write(data)
                    break
                except FileExistsError:
                    prefix += 1

        logger.info(f"File uploaded: {file_name} ({len(data)} bytes)")
        return StoredFile(file_name=file_name, size=len(data), original_name=original_name)

    def list_outbox(self) -> list[OutboxFile]:
        """List outbox files, newest first."""
        with self._file_lock(exclusive=False):
            if not self.outbox_dir.exists():
                return []
            files = []
            for path in self.outbox_dir.iterdir():
                if path.name.startswith(".") or path.name.endswith(META_SUFFIX):
                    continue
                if not path.is_file():
                    continue
                st = path.stat()
                created = getattr(st, "st_birthtime", st.st_mtime)
                files.append(
                    OutboxFile(
                        name=path.name,
                        size=st.st_size,
                        created=datetime.fromtimestamp(created, tz=timezone.utc),
                        description=self._read_description(path),
                    )
                )
        return sorted(files, key=lambda f: f.created, reverse=True)

    def _read_description(self, path: Path) -> str | None:
        meta_path = path.with_name(path.name + META_SUFFIX)
        if not meta_path.exists():
            return None
        try:
            meta = json.loads(meta_path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Ignoring unreadable meta file {meta_path.name}: {e}")
            return None
        description = meta.get("description") if isinstance(meta, dict) else None
        return str(description) if description is not None else None

    def add_outbox_file(
        self,
        file_name: str,
        content: str,
        description: str | None = None,
        encoding: str | None = None,
    ) -> StoredFile:
        """Write a file (and optional description sidecar) into the outbox.

        Existing files with the same name are replaced.

        Raises:
            InvalidFileNameError: If the name is unusable.
        """
        name = clean_file_name(file_name, strict=True)
        if name.endswith(META_SUFFIX):
            raise InvalidFileNameError(f"Invalid file name: {file_name!r}")
        data = decode_content(content, encoding)

        with self._file_lock(exclusive=True):
            self.outbox_dir.mkdir(parents=True, exist_ok=True)
            (self.outbox_dir / name).write_bytes(data)
            meta_path = self.outbox_dir / (name + META_SUFFIX)
            if description:
                meta_path.write_text(json.dumps({"description": description}))
            elif meta_path.exists():
                meta_path.unlink()

        logger.info(f"Bill added file to outbox: {name} ({len(data)} bytes)")
        return StoredFile(file_name=name, size=len(data), original_name=file_name)

    def read_outbox(self, file_name: str) -> bytes:
        """Read an outbox file for download.

        Raises:
            InvalidFileNameError: If the name is unusable.
            OutboxFileNotFoundError: If no such file exists.
        """
        name = clean_file_name(file_name, strict=True)
        path = self.outbox_dir / name
        if name.endswith(META_SUFFIX) or not path.is_file():
            raise OutboxFileNotFoundError(f"File not found: {name}")
        with self._file_lock(exclusive=False):
            return path.read_bytes()
