"""CLI entry point for crazy-notes."""

from __future__ import annotations

import asyncio
import sys
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

import click

from crazy_notes import __version__
from crazy_notes.l1_entities.config import AppConfig
from crazy_notes.l1_entities.errors import NotFoundError, PlaybackError, StorageError, SummarizationError
from crazy_notes.l2_use_cases.ports.speech_recognizer import AuthorizationStatus
from crazy_notes.l4_frameworks_and_drivers.config import InfraConfig, build_app_config


@dataclass(frozen=True)
class Settings:
    config: AppConfig
    infra: InfraConfig


def _fail(message: str) -> None:
    click.echo(f'Error: {message}', err=True)
    sys.exit(1)


def _build_container(settings: Settings):
    from crazy_notes.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: not loaded on --help
        DependencyContainer,
    )
    from crazy_notes.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: not needed for --help
        setup_file_logging,
    )

    setup_file_logging(Path(settings.config.storage.annotations_dir))
    return DependencyContainer(settings.config, settings.infra)


def _format_state(entry) -> str:
    return f' [{entry.state.value}]' if entry.state is not None else ''


def _echo_entry(entry) -> None:
    click.echo(f'{entry.file_id}{_format_state(entry)}')
    click.echo(f'  Title:      {entry.title}')
    click.echo(f'  Summary:    {entry.summary}')
    click.echo(f'  Transcript: {entry.transcript}')
    if entry.error:
        click.echo(f'  Error:      {entry.error}')


async def _start_session(container) -> None:
    """Load annotations, authorize recognition once, and warn about an unreachable LLM."""
    pruned = container.controller.load()
    if pruned:
        click.echo(f'Removed annotations for {len(pruned)} missing recording(s).', err=True)
    status = await container.controller.authorize()
    if status is not AuthorizationStatus.AUTHORIZED:
        click.echo('Warning: speech recognition is not authorized. Transcription will fail.', err=True)
    ok, err = await asyncio.to_thread(container.llm_client.check_connectivity)
    if not ok:
        click.echo(f'Warning: LLM endpoint not reachable ({err}). Titles will show an error.', err=True)


async def _ingest(container, sources: list[tuple[bytes, str | None]]) -> list[str]:
    await _start_session(container)
    file_ids = []
    try:
        for data, name in sources:
            blob = container.controller.receive(data, name)
            click.echo(f'Received {blob.file_id}')
            file_ids.append(blob.file_id)
        await container.controller.wait_idle()
    finally:
        container.recognizer.close()
    return file_ids


@click.group()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_path):
    """crazy-notes -- voice memos, transcribed and titled automatically."""
    from crazy_notes.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )

    try:
        raw = YamlConfigLoader().load_raw(config_path)
        ctx.obj = Settings(config=build_app_config(raw), infra=InfraConfig.model_validate(raw))
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def ingest(settings: Settings, files: tuple[Path, ...]):
    """Add audio FILES (e.g. transferred from a companion device) and process them."""
    container = _build_container(settings)
    try:
        file_ids = asyncio.run(_ingest(container, [(f.read_bytes(), f.name) for f in files]))
    except StorageError as e:
        _fail(str(e))
    for file_id in file_ids:
        _echo_entry(container.controller.detail(file_id))


@cli.command()
@click.option('-s', '--seconds', type=float, default=None, help='Stop after this many seconds (default: Ctrl-C).')
@click.pass_obj
def record(settings: Settings, seconds: float | None):
    """Record from the microphone, then transcribe and title the recording."""
    from crazy_notes.l3_interface_adapters.gateways.sounddevice_recorder import (  # noqa: PLC0415 -- deferred: PortAudio only when recording
        SounddeviceRecorder,
    )

    click.echo('Recording... press Ctrl-C to stop.', err=True)
    data = SounddeviceRecorder().record(seconds)
    container = _build_container(settings)
    try:
        file_ids = asyncio.run(_ingest(container, [(data, f'{uuid.uuid4()}.wav')]))
    except StorageError as e:
        _fail(str(e))
    for file_id in file_ids:
        _echo_entry(container.controller.detail(file_id))


@cli.command(name='list')
@click.pass_obj
def list_recordings(settings: Settings):
    """List recordings, newest first."""
    container = _build_container(settings)
    container.controller.load()
    entries = container.controller.entries()
    if not entries:
        click.echo('No recordings yet.')
        return
    for entry in entries:
        click.echo(f'{entry.title:<12} {entry.preview:<20} {entry.file_id}{_format_state(entry)}')


@cli.command()
@click.argument('file_id')
@click.pass_obj
def show(settings: Settings, file_id: str):
    """Show title, summary and transcript of one recording."""
    container = _build_container(settings)
    container.controller.load()
    try:
        _echo_entry(container.controller.detail(file_id))
    except NotFoundError as e:
        _fail(str(e))


@cli.command()
@click.argument('file_ids', nargs=-1, required=True)
@click.pass_obj
def delete(settings: Settings, file_ids: tuple[str, ...]):
    """Delete recordings together with their transcripts and titles."""
    container = _build_container(settings)
    container.controller.load()
    failed = False
    for file_id in file_ids:
        try:
            container.controller.delete(file_id)
            click.echo(f'Deleted {file_id}')
        except (NotFoundError, StorageError) as e:
            click.echo(f'Error: {e}', err=True)
            failed = True
    if failed:
        sys.exit(1)


@cli.command()
@click.argument('file_ids', nargs=-1)
@click.pass_obj
def retry(settings: Settings, file_ids: tuple[str, ...]):
    """Re-run processing for FILE_IDS, or for every recording without a transcript."""
    container = _build_container(settings)

    async def _run() -> list[str]:
        await _start_session(container)
        try:
            started = container.controller.retry(list(file_ids))
            await container.controller.wait_idle()
        finally:
            container.recognizer.close()
        return started

    try:
        started = asyncio.run(_run())
    except NotFoundError as e:
        _fail(str(e))
    if not started:
        click.echo('Nothing to process.')
    for file_id in started:
        _echo_entry(container.controller.detail(file_id))


@cli.command()
@click.argument('file_id')
@click.pass_obj
def play(settings: Settings, file_id: str):
    """Play a recording, showing elapsed / total time."""
    container = _build_container(settings)
    session = container.playback
    try:
        session.play(file_id)
    except (NotFoundError, PlaybackError) as e:
        _fail(str(e))
    try:
        while session.is_playing:
            click.echo(f'\r{session.position().label()}', nl=False)
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        click.echo(f'\r{session.position().label()}')
        session.stop()


@cli.command()
@click.argument('prompt')
@click.option('--summarize', is_flag=True, help='Ask for a summary of PROMPT instead of a free answer.')
@click.pass_obj
def ask(settings: Settings, prompt: str, summarize: bool):
    """Ask the assistant; the answer is saved as a note named by its one-line summary."""
    container = _build_container(settings)
    try:
        result = asyncio.run(container.assistant.execute(prompt, summarize=summarize))
    except (ValueError, SummarizationError, StorageError) as e:
        _fail(str(e))
    click.echo(result.answer)
    click.echo(f'\nSaved: {result.note_path}', err=True)
