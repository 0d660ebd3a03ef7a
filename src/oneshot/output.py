"""Streaming JSONL writer for trace events."""

import json
from pathlib import Path
from typing import TextIO

from .core.protocols import TraceCategory, TraceEvent
from .core.trace import PAYLOAD_LABEL

PAYLOAD_CATEGORIES = (
    TraceCategory.REQUEST_BODY,
    TraceCategory.RESPONSE_RAW,
    TraceCategory.RESPONSE_BODY,
)


class JsonlTraceWriter:
    """Trace sink that writes events to a JSONL file one at a time."""

    def __init__(
        self,
        output_path: str | Path,
        include_body: bool = True,
    ):
        self.output_path = Path(output_path)
        self.include_body = include_body
        self._file: TextIO | None = None
        self._count = 0

    def __enter__(self) -> "JsonlTraceWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.output_path, "w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file is not None:
            self._file.close()
            self._file = None

    def emit(self, event: TraceEvent):
        """Write a single event to the output file."""
        if self._file is None:
            raise RuntimeError("JsonlTraceWriter must be used as context manager")

        # The payload label line is always written
        if (
            not self.include_body
            and event.category in PAYLOAD_CATEGORIES
            and event.text != PAYLOAD_LABEL
        ):
            return

        self._file.write(json.dumps(event.to_dict(), ensure_ascii=False) + "\n")
        self._file.flush()
        self._count += 1

    @property
    def count(self) -> int:
        """Number of events written."""
        return self._count
