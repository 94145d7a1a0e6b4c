from .mime import (
    DEFAULT_BINARY_MIME,
    FOLDER_CONTENT_TYPE,
    UTF8_TEXT_MIME,
    infer_content_type,
    is_folder,
)
from .time import normalize_dt, parse_optional_rfc3339, parse_rfc3339, to_rfc3339

__all__ = [
    "FOLDER_CONTENT_TYPE",
    "UTF8_TEXT_MIME",
    "DEFAULT_BINARY_MIME",
    "is_folder",
    "infer_content_type",
    "parse_rfc3339",
    "parse_optional_rfc3339",
    "to_rfc3339",
    "normalize_dt",
]
