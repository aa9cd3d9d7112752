"""
io_utils.py
===========

I/O utilities + lightweight timing decorator for the **spatial_smoothing**
project.

The module centralises:

1. **Path management**
   * PROJECT_ROOT  – repository root (directory containing this file).
   * RESULTS_DIR   – `<root>/results/<timestamp>`

2. **Image byte helpers**
   * read_image_bytes  – returns the encoded file content (PNG/JPEG/...).
   * save_image_bytes  – writes encoded bytes, auto‑creates parent dirs.

3. **@timer decorator**
   * Measures wall‑clock (time.perf_counter) and logs at the module logger.
   * Accumulates per‑function totals in TIMINGS for the run log.

4. **Run log**
   * write_run_log(param_lines) → `<RESULTS_DIR>/run.txt`.

Decoding and encoding of pixels is left to `codec.py`; this module only moves
bytes.  Directories are created lazily when first used.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Callable, Dict, List, Optional, TypeVar

__all__ = [
    "PROJECT_ROOT",
    "RESULTS_DIR",
    "TIMINGS",
    "ensure_dir",
    "read_image_bytes",
    "save_image_bytes",
    "timer",
    "reset_timings",
    "write_run_log",
]

# --------------------------------------------------------------------------- #
# Path management
# --------------------------------------------------------------------------- #

PROJECT_ROOT: Path = Path(__file__).resolve().parent

# Timestamped results directory (e.g. results/20250729_143015)
_RESULTS_STAMP: str = datetime.now().strftime("%Y%m%d_%H%M%S")
RESULTS_DIR: Path = PROJECT_ROOT / "results" / _RESULTS_STAMP

# timing tracker for log file (run.txt)
TIMINGS: Dict[str, float] = {}


def ensure_dir(p: Path) -> Path:
    """Create directory *p* (and parents) if it does not exist. Return *p*."""
    p.mkdir(parents=True, exist_ok=True)
    return p


# --------------------------------------------------------------------------- #
# Image byte helpers
# --------------------------------------------------------------------------- #


def read_image_bytes(path: str | Path) -> bytes:
    """
    Load the raw (still encoded) content of the image at *path*.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    return p.read_bytes()


def save_image_bytes(data: bytes, path: str | Path) -> Path:
    """
    Save encoded image *data* to *path*.
    Creates target directory hierarchy if necessary.
    """
    p = Path(path)
    ensure_dir(p.parent)
    p.write_bytes(data)
    return p


# --------------------------------------------------------------------------- #
# Timing decorator
# --------------------------------------------------------------------------- #

_F = TypeVar("_F", bound=Callable[..., object])

logger = logging.getLogger("io_utils")
logger.setLevel(logging.INFO)


def timer(fn: _F) -> _F:
    """
    Decorator that logs wall‑clock time for *fn* at INFO level.

    Usage
    -----
    >>> @timer
    ... def filter_matrix(...):
    ...     ...
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        res = fn(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start) * 1e3
        logger.info(f"{fn.__name__} finished in {elapsed_ms:.2f} ms")

        TIMINGS[fn.__name__] = TIMINGS.get(fn.__name__, 0.0) + elapsed_ms

        return res

    return wrapper  # type: ignore[return-value]


def reset_timings() -> None:
    """Erase all stored timing information (useful for tests)."""
    TIMINGS.clear()


# --------------------------------------------------------------------------- #
# Run log
# --------------------------------------------------------------------------- #


def write_run_log(
    param_lines: Optional[List[str]] = None,
    log_dir: Optional[Path] = None,
) -> Path:
    """
    Write a text log summarising run parameters + timing.

    Parameters
    ----------
    param_lines : list[str] or None
        Pre‑formatted strings (e.g. ["edge: replication", "size: 3"]).  Each
        is written on its own line before the timing table.
    log_dir : Path or None
        Target directory; defaults to RESULTS_DIR.

    Returns
    -------
    Path
        Absolute path to the written `run.txt`.
    """
    log_path = ensure_dir(log_dir or RESULTS_DIR) / "run.txt"
    with log_path.open("w", encoding="utf-8") as f:
        f.write(f"run_start        : {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if param_lines:
            f.write("\n# Parameters\n")
            for ln in param_lines:
                f.write(ln + "\n")

        f.write("\n# Stage timings (ms)\n")
        total = 0.0
        for name, ms in sorted(TIMINGS.items(), key=lambda x: x[0]):
            f.write(f"{name:<16}: {ms:8.2f}\n")
            total += ms
        f.write("-" * 32 + "\n")
        f.write(f"{'Total':<16}: {total:8.2f}\n")
    return log_path
