"""
File naming - Sanitized, collision-free PDF file names.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union


logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 200


def sanitize_title(title: Optional[str]) -> str:
    """Lowercase a title and reduce it to [a-z0-9_]."""
    clean = re.sub(r"[^a-z0-9]", "_", (title or "webpage").lower())
    clean = re.sub(r"_+", "_", clean)[:MAX_NAME_LENGTH]
    return clean if clean.strip("_") else "webpage"


def name_for(title: Optional[str], existing: Iterable[str], extension: str = ".pdf") -> str:
    """
    Pick a file name for a title that is not already taken.

    Collisions get a numeric suffix: name.pdf, name_1.pdf, name_2.pdf, ...
    """
    taken = set(existing)
    base = sanitize_title(title)

    increment = 0
    while True:
        name = f"{base}{extension}" if increment == 0 else f"{base}_{increment}{extension}"
        if name not in taken:
            return name
        increment += 1


class FileNamer:
    """Generates unique file names inside an output directory."""

    def __init__(self, output_dir: Union[str, Path] = "output"):
        self.output_dir = Path(output_dir)

    def generate_file_name(self, title: Optional[str]) -> str:
        """Create the output directory if needed and return a free file name."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        existing = [p.name for p in self.output_dir.iterdir()]
        name = name_for(title, existing)
        logger.debug("Generated filename %s", name)
        return name

    def generate_path(self, title: Optional[str]) -> Path:
        return self.output_dir / self.generate_file_name(title)
