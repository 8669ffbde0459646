"""Tests for the Pillow-backed image pool and mask loaders."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from mosaic.media import load_image_pool, load_mask


@pytest.fixture
def image_dir(tmp_path):
    Image.new("RGB", (300, 200), (255, 0, 0)).save(tmp_path / "b_landscape.png")
    Image.new("RGB", (120, 240), (0, 255, 0)).save(tmp_path / "a_portrait.jpg")
    (tmp_path / "notes.txt").write_text("not an image")
    (tmp_path / "nested").mkdir()
    return tmp_path


class TestImagePool:
    def test_sorted_by_name_with_native_sizes(self, image_dir):
        pool = load_image_pool(image_dir)
        assert [a.name for a in pool] == ["a_portrait.jpg", "b_landscape.png"]
        assert (pool[0].width, pool[0].height) == (120, 240)
        assert pool[1].aspect_ratio == pytest.approx(1.5)

    def test_images_are_decoded(self, image_dir):
        pool = load_image_pool(image_dir)
        assert all(isinstance(a.image, Image.Image) for a in pool)
        assert pool[1].image.getpixel((0, 0)) == (255, 0, 0)

    def test_unreadable_files_are_skipped(self, image_dir, caplog):
        with caplog.at_level("WARNING", logger="mosaic.media"):
            pool = load_image_pool(image_dir)
        assert "notes.txt" not in [a.name for a in pool]
        assert "notes.txt" in caplog.text

    def test_empty_directory(self, tmp_path):
        assert load_image_pool(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image_pool(tmp_path / "missing")


class TestLoadMask:
    def test_rgba_uses_alpha(self, tmp_path):
        rgba = np.zeros((40, 60, 4), dtype=np.uint8)
        rgba[..., :3] = 255
        rgba[10:30, 20:40, 3] = 200
        path = tmp_path / "mask.png"
        Image.fromarray(rgba).save(path)

        mask = load_mask(path)
        assert mask.shape == (40, 60)
        assert mask.dtype == np.uint8
        assert mask[20, 30] == 200
        assert mask[0, 0] == 0

    def test_greyscale_uses_luminance(self):
        grey = np.zeros((20, 20), dtype=np.uint8)
        grey[5:15, 5:15] = 255
        mask = load_mask(Image.fromarray(grey))
        assert np.array_equal(mask, grey)

    def test_mask_is_writable_copy(self):
        mask = load_mask(Image.new("L", (8, 8), 0))
        mask[0, 0] = 1
        assert mask[0, 0] == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_mask(tmp_path / "nope.png")
