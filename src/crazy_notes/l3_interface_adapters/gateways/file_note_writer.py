"""Gateway: assistant notes as text files — implements NoteWriter port."""

from __future__ import annotations

import logging
from pathlib import Path

from crazy_notes.l1_entities.errors import StorageError

log = logging.getLogger('cn.persist')


class FileNoteWriter:
    def __init__(self, notes_dir: Path) -> None:
        self._notes_dir = notes_dir

    def save_note(self, name: str, content: str) -> Path:
        safe = name.strip().replace('/', '_') or 'note'
        path = self._notes_dir / f'{safe}.txt'
        try:
            self._notes_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise StorageError(f'Cannot save note {path.name}: {e}') from e
        log.info('Note saved at %s', path)
        return path
