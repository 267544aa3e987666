"""Folder keys derived from profile names."""
import re
import unicodedata
from pathlib import PurePosixPath
from typing import Optional

FOLDER_ROOT = "actors"

_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def strip_whitespace(name: str) -> str:
    """'Fabio Levy' -> 'FabioLevy'. Case is preserved."""
    return _WHITESPACE.sub("", name)


def sanitize_folder_name(name: str) -> str:
    """
    Gallery fallback key: NFD decomposition, combining marks dropped,
    then every remaining non-alphanumeric character dropped.
    'José Núñez' -> 'JoseNunez'.
    """
    decomposed = unicodedata.normalize("NFD", name)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", without_marks)


def profile_folder_path(name: str) -> str:
    """Folder path stored on a profile at its first upload."""
    return f"{FOLDER_ROOT}/{strip_whitespace(name)}/images"


def folder_matches_name(folder_name: str, profile_name: str) -> bool:
    # Whole-name comparison only, no partial matches
    return strip_whitespace(profile_name).lower() == folder_name.lower()


def base_file_name(filename: Optional[str]) -> str:
    """
    Last path component of a client-supplied file name, with either slash
    style. '' when nothing usable is left ('', '.', '..').
    """
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    if name in ("", ".", ".."):
        return ""
    return name
