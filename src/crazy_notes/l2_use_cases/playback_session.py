"""Use case: single-slot playback session."""

from __future__ import annotations

import logging

from crazy_notes.l1_entities.playback import PlaybackPosition
from crazy_notes.l1_entities.recording import FileId
from crazy_notes.l2_use_cases.ports.audio_player import AudioPlayer
from crazy_notes.l2_use_cases.ports.blob_store import BlobStore

log = logging.getLogger('cn.playback')


class PlaybackSession:
    """At most one recording loaded and playing at a time.

    ``play`` releases whatever was loaded before. ``stop`` releases the
    current file; a file that finishes on its own stays loaded at its end.
    """

    def __init__(self, blob_store: BlobStore, player: AudioPlayer) -> None:
        self._blob_store = blob_store
        self._player = player
        self._file_id: FileId | None = None
        self._duration = 0.0
        self._playing = False

    @property
    def current_file_id(self) -> FileId | None:
        return self._file_id

    @property
    def is_playing(self) -> bool:
        if self._playing and not self._player.is_active():
            self._playing = False
            log.info('Playback finished: %s', self._file_id)
        return self._playing

    def play(self, file_id: FileId) -> None:
        """Stop any current playback and start *file_id*. Raises NotFoundError or PlaybackError."""
        self.stop()
        blob = self._blob_store.get(file_id)
        duration = self._player.load(blob.path)
        self._file_id = file_id
        self._duration = duration
        self._player.start()
        self._playing = True
        log.info('Playing %s (%.1fs)', file_id, duration)

    def stop(self) -> None:
        if self._playing:
            self._player.stop()
            log.info('Stopped %s', self._file_id)
        self._playing = False
        self._file_id = None
        self._duration = 0.0

    def position(self) -> PlaybackPosition:
        if self._file_id is None:
            return PlaybackPosition()
        return PlaybackPosition(elapsed=min(self._player.elapsed(), self._duration), total=self._duration)
