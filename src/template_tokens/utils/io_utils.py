"""
Centralized file I/O utilities.

- Single place for encoding and template discovery
- Use Path.read_text() consistently (no raw open/read)
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Union

from .config import DEFAULT_FILE_ENCODING, TEMPLATE_FILE_EXTENSIONS


def read_source_file(path: Union[Path, str]) -> str:
    """Read template file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def is_template_path(path: Union[Path, str]) -> bool:
    """True if path has a template file extension."""
    return str(path).lower().endswith(TEMPLATE_FILE_EXTENSIONS)


def iter_template_files(paths: Iterable[Union[Path, str]]) -> Iterator[Path]:
    """
    Expand files and directories into template files.

    Explicit files are yielded as given, whatever their extension.
    Directories are walked recursively in sorted order.
    """
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            found: List[Path] = sorted(
                child for child in p.rglob("*") if child.is_file() and is_template_path(child)
            )
            yield from found
        else:
            yield p
