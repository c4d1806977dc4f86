"""Write extracted and rendered files to disk."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .models import WriteError

logger = logging.getLogger("ccpick.output")


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(str(path), e.strerror or str(e)) from e


def write_text(path: Path, text: str) -> None:
    """Write text as UTF-8, creating parent directories.

    Newlines are written untranslated so extracted rounds keep their
    original terminators.

    Raises:
        WriteError: the directory or file could not be written
    """
    ensure_dir(path.parent)
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise WriteError(str(path), e.strerror or str(e)) from e


@dataclass(frozen=True)
class BatchResult:
    """Outcome of writing several independent files."""
    total: int
    written: tuple[Path, ...] = ()
    failures: tuple[WriteError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def write_batch(items: list[tuple[Path, str]]) -> BatchResult:
    """Write each (path, text) pair; a failed write does not stop the rest.

    Returns:
        BatchResult listing the paths written and the errors hit
    """
    written: list[Path] = []
    failures: list[WriteError] = []

    for path, text in items:
        try:
            write_text(path, text)
        except WriteError as e:
            logger.warning("%s", e)
            failures.append(e)
            continue
        written.append(path)

    return BatchResult(total=len(items), written=tuple(written), failures=tuple(failures))
