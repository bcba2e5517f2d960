"""
Song file I/O.

File format:
- UTF-8 JSON, indented for hand editing and diffs
- Contains the full Song tree (see Song.to_dict)
"""

import json
import logging
from pathlib import Path

from chordchart.song import Song

logger = logging.getLogger(__name__)


def save_song(song: Song, path: str | Path) -> Path:
    """
    Write a song to disk.

    Args:
        song: Song to save.
        path: Destination file path.

    Returns:
        The path written to.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    encoded = json.dumps(song.to_dict(), indent=2)
    path.write_text(encoded + "\n", encoding="utf-8")
    logger.info("Saved '%s' to %s", song.title, path)
    return path


def load_song(path: str | Path) -> Song:
    """
    Read a song from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        ValueError: If the content is not a valid song document.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a song object")
    try:
        song = Song.from_dict(data)
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"{path} is missing song fields: {exc}") from exc

    logger.info("Loaded '%s' from %s", song.title, path)
    return song
