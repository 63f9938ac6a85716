"""
app/ingestion/uploads.py — Store-then-delete handling for uploaded files.
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Generator

logger = logging.getLogger(__name__)


@contextmanager
def temporary_upload(contents: bytes, suffix: str = ".csv") -> Generator[str, None, None]:
    """
    Write upload bytes to a temp file and yield its path.

    The file is removed on exit whether or not the body raised.
    """
    fd, path = tempfile.mkstemp(prefix="leads-", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(contents)
        logger.debug("Stored upload (%d bytes) at %s", len(contents), path)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        logger.debug("Removed upload temp file %s", path)
