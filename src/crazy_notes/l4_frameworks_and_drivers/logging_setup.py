"""File-based debug logging setup."""

from __future__ import annotations

import logging
from pathlib import Path


def setup_file_logging(log_dir: Path) -> Path:
    """Configure file-based debug logging into *log_dir*. Returns the log file path."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / 'cn_debug.log'
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    root = logging.getLogger('cn')
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    logging.getLogger('cn.controller').info('Debug logging started → %s', log_path)
    return log_path
