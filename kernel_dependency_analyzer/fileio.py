"""
Atomic text file output
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .exceptions import ExportError

logger = logging.getLogger(__name__)


def atomic_write_text(path: Union[str, Path], content: str, encoding: str = 'utf-8') -> Path:
    """Write ``content`` to ``path`` so readers never see a partial file.

    The text goes to a temporary file in the target directory which is then
    renamed over ``path``. On failure the temporary file is removed and an
    ExportError is raised; the previous file at ``path`` is left untouched.
    """
    path = Path(path)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile('w', encoding=encoding, dir=path.parent,
                                         prefix=f".{path.name}.", suffix='.tmp',
                                         delete=False) as handle:
            tmp_name = handle.name
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ExportError(path, str(e)) from e

    logger.info(f"Wrote {path}")
    return path
