"""Plain-text file loading and saving."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

from termedit.buffer import BufferDocument
from termedit.runtime import telemetry


@dataclass(slots=True)
class LoadResult:
    lines: List[str]
    exists: bool
    error: Optional[str] = None


class FileSink:
    """Writes each line followed by a newline, replacing the file."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def write(self, path: str, lines: Sequence[str]) -> bool:
        with telemetry.span(
            "persistence::write",
            component="persistence",
            metadata={"path": path, "lines": len(lines)},
        ) as handle:
            try:
                with open(path, "w", encoding=self.encoding, newline="\n") as stream:
                    for line in lines:
                        stream.write(f"{line}\n")
            except OSError as exc:
                handle.warn(str(exc))
                return False
        return True


def load_lines(path: str, *, encoding: str = "utf-8") -> LoadResult:
    """Read ``path``; anything unreadable becomes a single empty line."""

    if not os.path.exists(path):
        return LoadResult(lines=[""], exists=False)
    try:
        with open(path, "r", encoding=encoding, newline="") as stream:
            text = stream.read()
    except (OSError, UnicodeDecodeError) as exc:
        telemetry.record_event(
            "persistence.load_failed",
            level="warning",
            data={"path": path, "reason": str(exc)},
        )
        return LoadResult(lines=[""], exists=True, error=str(exc))
    return LoadResult(
        lines=list(BufferDocument.from_text(text).snapshot()), exists=True
    )


__all__ = ["FileSink", "LoadResult", "load_lines"]
