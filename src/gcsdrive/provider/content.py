"""Line-oriented content readers and writers for objects."""

from __future__ import annotations

import io
from typing import Callable, Iterable, Optional

from gcsdrive.errors import InvalidOperationError
from gcsdrive.models import ObjectInfo


class GcsContentReader:
    """Reads the downloaded contents of an object line by line (Get-Content)."""

    def __init__(self, data: bytes, *, encoding: str = "utf-8") -> None:
        self._buffer = io.BytesIO(data)
        self._encoding = encoding
        self._closed = False

    def read(self, read_count: int = 0) -> list[str]:
        """
        Return up to `read_count` lines without their line endings.

        A `read_count` of 0 or less reads every remaining line.

        Raises:
            InvalidOperationError: if the content is not text in the reader's
                encoding.
        """
        self._check_open()
        lines: list[str] = []
        while read_count <= 0 or len(lines) < read_count:
            raw = self._buffer.readline()
            if not raw:
                break
            try:
                text = raw.decode(self._encoding)
            except UnicodeDecodeError as exc:
                raise InvalidOperationError(
                    f"Object content is not {self._encoding} text",
                    details={"encoding": self._encoding},
                    cause=exc,
                ) from exc
            lines.append(text.rstrip("\r\n"))
        return lines

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._buffer.seek(offset, whence)

    def close(self) -> None:
        self._closed = True
        self._buffer.close()

    def __enter__(self) -> "GcsContentReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise InvalidOperationError("Content reader is closed")


class GcsContentWriter:
    """
    Collects lines for an object and uploads them on close (Set-Content).

    Each written item is followed by a newline. Nothing is uploaded if the
    writer is discarded or its `with` block raises.
    """

    def __init__(
        self,
        upload: Callable[[bytes], ObjectInfo],
        *,
        encoding: str = "utf-8",
    ) -> None:
        self._upload = upload
        self._encoding = encoding
        self._buffer = io.StringIO()
        self._closed = False
        self.result: Optional[ObjectInfo] = None

    def write(self, content: Iterable[object]) -> None:
        self._check_open()
        for item in content:
            self._buffer.write(f"{item}\n")

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._buffer.seek(offset, whence)

    def close(self) -> Optional[ObjectInfo]:
        """Upload the collected content. Closing twice is a no-op."""
        if self._closed:
            return self.result
        self._closed = True
        data = self._buffer.getvalue().encode(self._encoding)
        self._buffer.close()
        self.result = self._upload(data)
        return self.result

    def discard(self) -> None:
        self._closed = True
        self._buffer.close()

    def __enter__(self) -> "GcsContentWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.discard()

    def _check_open(self) -> None:
        if self._closed:
            raise InvalidOperationError("Content writer is closed")
