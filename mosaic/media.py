"""Image pool and mask source adapters backed by Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from mosaic.engine.context import ImageAsset

logger = logging.getLogger(__name__)


def load_image_pool(directory: str | Path) -> list[ImageAsset]:
    """Decode every regular file in ``directory`` (sorted by name) into an ImageAsset.

    Files Pillow cannot read are skipped with a warning.
    """
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Image directory not found: {root}")

    pool: list[ImageAsset] = []
    for path in sorted(p for p in root.iterdir() if p.is_file()):
        try:
            with Image.open(path) as im:
                im.load()
                pool.append(ImageAsset(name=path.name, width=im.width, height=im.height, image=im.copy()))
        except (UnidentifiedImageError, OSError) as e:
            logger.warning("Skipping unreadable image %s: %s", path.name, e)

    logger.info("Loaded %d image(s) from %s", len(pool), root)
    return pool


def load_mask(source: str | Path | Image.Image) -> NDArray[np.uint8]:
    """Opacity grid from an image: its alpha channel, or luminance when it has none."""
    if isinstance(source, Image.Image):
        return _mask_from_image(source)
    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"Mask file not found: {path}")
    with Image.open(path) as im:
        return _mask_from_image(im)


def _mask_from_image(im: Image.Image) -> NDArray[np.uint8]:
    if "A" in im.getbands():
        channel = im.getchannel("A")
    else:
        channel = im.convert("L")
    return np.asarray(channel, dtype=np.uint8).copy()
