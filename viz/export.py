from __future__ import annotations

import io

import numpy as np
from PIL import Image


def array_to_png_bytes(z: np.ndarray) -> bytes:
    """Convert a 2D float field to an 8-bit grayscale PNG.

    Values are min/max normalized to [0, 255]. Degenerate (constant) arrays
    become all zeros.
    """

    z = np.asarray(z, dtype=np.float64)
    if z.ndim != 2:
        raise ValueError("expected a 2D array")

    zmin = float(np.min(z))
    zmax = float(np.max(z))
    if zmax == zmin:
        img = np.zeros(z.shape, dtype=np.uint8)
    else:
        zn = (z - zmin) / (zmax - zmin)
        img = np.clip(zn * 255.0, 0.0, 255.0).astype(np.uint8)

    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def heightmap_to_png_bytes(height: np.ndarray) -> bytes:
    """Integer heights written as gray levels, clamped to [0, 255] without rescaling."""

    h = np.asarray(height)
    if h.ndim != 2:
        raise ValueError("expected a 2D array")
    img = np.clip(h, 0, 255).astype(np.uint8)
    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def rgb_to_png_bytes(rgb01: np.ndarray) -> bytes:
    rgb = np.asarray(rgb01, dtype=np.float64)
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValueError("rgb01 must be HxWx3")
    img = np.clip(np.rint(rgb * 255.0), 0.0, 255.0).astype(np.uint8)
    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def array_to_csv_bytes(z: np.ndarray) -> bytes:
    """One CSV row per array row; integers stay integers."""

    z = np.asarray(z)
    if z.ndim != 2:
        raise ValueError("expected a 2D array")
    fmt = "%d" if np.issubdtype(z.dtype, np.integer) else "%.6f"
    out = io.StringIO()
    np.savetxt(out, z, fmt=fmt, delimiter=",")
    return out.getvalue().encode("utf-8")


def array_to_npy_bytes(z: np.ndarray) -> bytes:
    z = np.asarray(z)
    out = io.BytesIO()
    np.save(out, z)
    return out.getvalue()
