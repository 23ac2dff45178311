"""Gateway: recordings directory — implements BlobStore port."""

from __future__ import annotations

import logging
import os
import tempfile
import uuid
from pathlib import Path

from crazy_notes.l1_entities.errors import NotFoundError, StorageError
from crazy_notes.l1_entities.recording import AudioBlob, FileId, sanitize_file_id

log = logging.getLogger('cn.persist')

DEFAULT_EXTENSION = '.m4a'
TEMP_PREFIX = '.incoming-'


class DirectoryBlobStore:
    """Stores each recording as one file; the file name is its FileId.

    Every regular file not starting with ``.`` is a recording. In-flight
    writes use a dot-prefixed temp name, and FileIds never start with ``.``.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, data: bytes, suggested_name: str | None = None) -> AudioBlob:
        name = sanitize_file_id(suggested_name or '') or f'{uuid.uuid4()}{DEFAULT_EXTENSION}'
        target = self._directory / name
        try:
            if target.exists() and target.read_bytes() == data:
                log.info('Duplicate delivery of %s; keeping existing blob', name)
                return self._blob(target)
            target = self._unique_path(target)

            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=TEMP_PREFIX)
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            blob = self._blob(target)
        except OSError as e:
            raise StorageError(f'Cannot save recording {target.name}: {e}') from e

        log.info('Saved %s (%d bytes)', target.name, len(data))
        return blob

    def get(self, file_id: FileId) -> AudioBlob:
        path = self._path_for(file_id)
        if not path.is_file():
            raise NotFoundError(file_id)
        return self._blob(path)

    def exists(self, file_id: FileId) -> bool:
        return self._path_for(file_id).is_file()

    def list(self) -> list[AudioBlob]:
        """Every stored recording, newest first, ties by FileId."""
        try:
            blobs = [self._blob(p) for p in self._directory.iterdir() if p.is_file() and not p.name.startswith('.')]
        except OSError as e:
            raise StorageError(f'Cannot list recordings in {self._directory}: {e}') from e
        blobs.sort(key=lambda b: b.file_id)
        blobs.sort(key=lambda b: b.created_at, reverse=True)
        return blobs

    def delete(self, file_id: FileId) -> None:
        path = self._path_for(file_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(file_id) from e
        except OSError as e:
            raise StorageError(f'Cannot delete recording {file_id}: {e}') from e
        log.info('Deleted blob %s', file_id)

    def _path_for(self, file_id: FileId) -> Path:
        safe = sanitize_file_id(file_id)
        if not safe or safe != file_id:
            raise NotFoundError(file_id)
        return self._directory / safe

    def _unique_path(self, target: Path) -> Path:
        candidate = target
        n = 0
        while candidate.exists():
            n += 1
            candidate = target.with_name(f'{target.stem}-{n}{target.suffix}')
        return candidate

    @staticmethod
    def _blob(path: Path) -> AudioBlob:
        stat = path.stat()
        return AudioBlob(file_id=path.name, path=path, size=stat.st_size, created_at=stat.st_mtime)
