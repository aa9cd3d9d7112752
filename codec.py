"""
codec.py
========

Image codec used by the filter orchestrator.  Everything format‑related lives
here; the filtering core only sees flat luminance buffers.

Public API
----------
decode(data: bytes) -> DecodedImage
extract_luminance(img: DecodedImage) -> NDArray[np.uint8]    # flat, row‑major
encode(width, height, buffer, fmt=".png") -> bytes
detect_format(data: bytes) -> str | None

Design Notes
------------
* OpenCV (`cv2.imdecode` / `cv2.imencode`) is used as the backend.
* Colour inputs are reduced to luminance with `cv2.cvtColor`; 16‑bit inputs
  are rescaled to 8‑bit.  No per‑channel processing is done.
* The source format is detected from the magic bytes so `encode` can write
  the result back in the same container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import cv2
import numpy as np

__all__ = ["DecodedImage", "decode", "extract_luminance", "encode", "detect_format"]


@dataclass(slots=True)
class DecodedImage:
    width: int
    height: int
    pixels: np.ndarray  # H×W or H×W×C, as returned by OpenCV
    fmt: str = ".png"


# magic prefix → OpenCV extension
_MAGIC = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"BM", ".bmp"),
    (b"II*\x00", ".tiff"),
    (b"MM\x00*", ".tiff"),
    (b"\x00\x00\x00\x0cjP  \r\n\x87\n", ".jp2"),
    (b"\xff\x4f\xff\x51", ".jp2"),
    (b"\x59\xa6\x6a\x95", ".ras"),
    (b"P1", ".pbm"),
    (b"P4", ".pbm"),
    (b"P2", ".pgm"),
    (b"P5", ".pgm"),
    (b"P3", ".ppm"),
    (b"P6", ".ppm"),
    (b"P7", ".pam"),
)

# containers that only hold colour samples
_COLOUR_ONLY = {".ppm"}


def detect_format(data: bytes) -> Optional[str]:
    """Guess the container from *data*'s magic bytes; None if unknown."""
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ".webp"
    for magic, ext in _MAGIC:
        if data.startswith(magic):
            return ext
    return None


def decode(data: bytes) -> DecodedImage:
    """
    Decode encoded image *data* (PNG, JPEG, BMP, TIFF, WebP, JPEG 2000,
    Netpbm, Sun raster).

    Raises
    ------
    IOError
        If OpenCV cannot decode the bytes, or the container is not one that
        `encode` can write back.
    """
    if not data:
        raise IOError("Empty image buffer.")

    buf = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise IOError("cv2 failed to decode image buffer.")

    fmt = detect_format(data)
    if fmt is None:
        raise IOError(f"Unrecognised image container (header {data[:12]!r}).")

    h, w = img.shape[:2]
    return DecodedImage(width=int(w), height=int(h), pixels=img, fmt=fmt)


def extract_luminance(img: DecodedImage) -> np.ndarray:
    """
    Return the image luminance as a flat uint8 array of length W·H.
    """
    px = img.pixels
    if px.dtype == np.uint16:
        px = (px / 257.0).round().astype(np.uint8)
    elif px.dtype != np.uint8:
        raise ValueError(f"Unsupported pixel dtype: {px.dtype}.")

    if px.ndim == 3:
        channels = px.shape[2]
        if channels == 1:
            px = px[:, :, 0]
        elif channels == 3:
            px = cv2.cvtColor(px, cv2.COLOR_BGR2GRAY)
        elif channels == 4:
            px = cv2.cvtColor(px, cv2.COLOR_BGRA2GRAY)
        else:
            raise ValueError(f"Unsupported channel count: {channels}.")

    return np.ascontiguousarray(px).ravel()


def encode(
    width: int,
    height: int,
    buffer: Sequence[int] | np.ndarray,
    fmt: str = ".png",
) -> bytes:
    """
    Encode a flat 8‑bit luminance *buffer* as a gray image (PPM gets three
    equal channels).

    Parameters
    ----------
    width, height : int
        Output dimensions.
    buffer : sequence of int or np.ndarray
        Row‑major values in [0, 255]; length must be width·height.
    fmt : str, default '.png'
        OpenCV extension of the container to write.

    Returns
    -------
    bytes
        Encoded file content.
    """
    arr = np.asarray(buffer, dtype=np.uint8)
    if arr.size != width * height:
        raise ValueError(
            f"Buffer holds {arr.size} values, {width}x{height} needs {width * height}."
        )

    img = arr.reshape(height, width)
    if fmt in _COLOUR_ONLY:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    ok, enc = cv2.imencode(fmt, img)
    if not ok:
        raise IOError(f"cv2 failed to encode image as {fmt}.")
    return enc.tobytes()
