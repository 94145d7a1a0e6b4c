from __future__ import annotations

import mimetypes

# Content type reported for logical folders that have no placeholder object.
FOLDER_CONTENT_TYPE: str = "Folder"

UTF8_TEXT_MIME: str = "text/plain; charset=utf-8"
DEFAULT_BINARY_MIME: str = "application/octet-stream"


def is_folder(content_type: str | None) -> bool:
    return content_type == FOLDER_CONTENT_TYPE


def infer_content_type(file_path: str) -> str:
    """
    Guess the content type of a local file from its extension.

    Falls back to application/octet-stream when the extension is unknown.
    """
    guessed, _ = mimetypes.guess_type(file_path, strict=False)
    return guessed or DEFAULT_BINARY_MIME
