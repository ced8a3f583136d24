import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi.concurrency import run_in_threadpool

from .config import logger


def ensure_upload_dir(upload_dir: str) -> None:
    os.makedirs(upload_dir, exist_ok=True)


def scratch_name(filename: str) -> str:
    """Timestamp-prefixed name so concurrent uploads of the same file don't collide."""
    base_name = os.path.basename(filename.replace("\\", "/")) or "upload"
    return f"{int(time.time() * 1000)}-{base_name}"


def _write_bytes(path: str, content: bytes) -> None:
    with open(path, "wb") as f:
        f.write(content)


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        # Cleanup failures are logged only; they never replace the request outcome
        logger.warning(f"Scratch file cleanup failed for {path}: {e}")


@asynccontextmanager
async def scratch_file(
    upload_dir: str, filename: str, content: bytes
) -> AsyncIterator[str]:
    """Persist an upload for the lifetime of the block and delete it on every exit path."""
    path = os.path.join(upload_dir, scratch_name(filename))
    try:
        await run_in_threadpool(_write_bytes, path, content)
        logger.info(f"Saved upload to scratch file {path} ({len(content)} bytes)")
        yield path
    finally:
        _remove_quietly(path)
