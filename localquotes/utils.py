"""
Small helpers shared by the resolvers and the CLI.
"""

import random
import string
import time
from typing import Optional


ID_ALPHABET = string.ascii_lowercase + string.digits


def get_current_seconds() -> int:
    """Current time as integer epoch seconds."""
    return int(time.time())


def filename_from_path(source_path: str) -> str:
    """
    Return the last segment of a vault-relative note path.

    Args:
        source_path: Path such as "journals/2024_05_22.md"

    Returns:
        The filename part, e.g. "2024_05_22.md"
    """
    return source_path.replace("\\", "/").split("/")[-1]


def is_inside_folder(source_path: str, folder: str) -> bool:
    """
    Check whether a note path starts with a folder prefix.

    This is a plain prefix test, so "Templates" also claims
    "Templates old/note.md".
    """
    folder = folder.replace("\\", "/").lstrip("/")
    if not folder:
        return False
    return source_path.replace("\\", "/").lstrip("/").startswith(folder)


def generate_block_id(length: int, rng: Optional[random.Random] = None) -> str:
    """Generate a short random id for a new quote block."""
    rng = rng or random.Random()
    return "".join(rng.choice(ID_ALPHABET) for _ in range(length))
