"""Gateway: JSON documents on disk — implements AnnotationStore port."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from crazy_notes.l1_entities.annotation import Annotation
from crazy_notes.l1_entities.errors import StorageError
from crazy_notes.l1_entities.recording import FileId

log = logging.getLogger('cn.persist')

TRANSCRIPTS_FILE = 'transcripts.json'
ANNOTATIONS_FILE = 'annotations.json'

_TRANSCRIPTS = TypeAdapter(dict[str, str])
_ANNOTATIONS = TypeAdapter(dict[str, Annotation])


class JsonAnnotationStore:
    """Keeps transcripts and annotations as two JSON maps keyed by FileId.

    Each write goes to a temp file that is fsynced and atomically renamed
    over the previous document, so a crash leaves either the old or the new
    map on disk.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def read_transcripts(self) -> dict[FileId, str]:
        return self._read(TRANSCRIPTS_FILE, _TRANSCRIPTS)

    def read_annotations(self) -> dict[FileId, Annotation]:
        return self._read(ANNOTATIONS_FILE, _ANNOTATIONS)

    def write_transcripts(self, transcripts: dict[FileId, str]) -> None:
        self._write(TRANSCRIPTS_FILE, _TRANSCRIPTS.dump_json(transcripts, indent=2))

    def write_annotations(self, annotations: dict[FileId, Annotation]) -> None:
        self._write(ANNOTATIONS_FILE, _ANNOTATIONS.dump_json(annotations, indent=2))

    def _read(self, name: str, adapter: TypeAdapter) -> dict:
        path = self._directory / name
        if not path.exists():
            return {}
        try:
            return adapter.validate_json(path.read_bytes())
        except (ValidationError, ValueError) as e:
            log.warning('Ignoring unreadable %s: %s', path, e)
            return {}
        except OSError as e:
            raise StorageError(f'Cannot read {path}: {e}') from e

    def _write(self, name: str, payload: bytes) -> None:
        path = self._directory / name
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f'.{name}.', suffix='.tmp')
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f'Cannot write {path}: {e}') from e
        log.debug('Wrote %s (%d bytes)', path.name, len(payload))
