from __future__ import annotations

import os
from pathlib import Path

from phrasetrail_core.settings import settings as core_settings


def write_text_replacing(path: Path, text: str) -> Path:
    """Write `text` beside `path` and move it into place, so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(text, encoding=core_settings.encoding)
    os.replace(tmp, path)
    return path
