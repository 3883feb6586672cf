import pytest
from PIL import Image

import mosaic.compositor as compositor_module
from mosaic.compositor import compose
from mosaic.errors import EmptyInput, NoReferenceFound, ReferenceSelectionFailed, TooManyTiles, UnsupportedCount
from mosaic.state import ScaleMode, Size

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
YELLOW = (255, 255, 0)


def _close(px, color, tol=3):
    return all(abs(a - b) <= tol for a, b in zip(px[:3], color))


def test_single_image_is_returned_unscaled():
    src = Image.new("RGB", (64, 48), RED)
    out = compose([src], Size(999, 999), ScaleMode.PAD)
    assert out.size == (64, 48)
    assert out.mode == "RGBA"
    assert out is not src
    assert _close(out.getpixel((10, 10)), RED, tol=0)


def test_two_images_side_by_side_at_reference_size():
    images = [Image.new("RGB", (100, 50), RED), Image.new("RGB", (80, 60), GREEN)]
    out = compose(images, Size(200, 50), ScaleMode.STRETCH)
    assert out.size == (200, 50)
    assert _close(out.getpixel((50, 25)), RED)
    assert _close(out.getpixel((150, 25)), GREEN)


def test_three_images_third_spans_bottom_row():
    images = [Image.new("RGB", (40, 20), c) for c in (RED, GREEN, BLUE)]
    out = compose(images, Size(80, 40), ScaleMode.STRETCH)
    assert out.size == (80, 40)
    assert _close(out.getpixel((20, 10)), RED)
    assert _close(out.getpixel((60, 10)), GREEN)
    assert _close(out.getpixel((5, 30)), BLUE)
    assert _close(out.getpixel((75, 30)), BLUE)


def test_four_images_fill_grid_in_input_order():
    images = [Image.new("RGB", (40, 20), c) for c in (RED, GREEN, BLUE, YELLOW)]
    out = compose(images, Size(80, 40), ScaleMode.PAD)
    assert _close(out.getpixel((20, 10)), RED)
    assert _close(out.getpixel((60, 10)), GREEN)
    assert _close(out.getpixel((20, 30)), BLUE)
    assert _close(out.getpixel((60, 30)), YELLOW)


def test_pad_pass_leaves_letterbox_transparent():
    # second tile is square, padded into a 40x20 cell at x=40..80
    images = [Image.new("RGB", (40, 20), RED), Image.new("RGB", (20, 20), GREEN)]
    out = compose(images, Size(80, 20), ScaleMode.PAD)
    assert out.getpixel((42, 10))[3] == 0
    assert out.getpixel((77, 10))[3] == 0
    assert _close(out.getpixel((60, 10)), GREEN)


def test_stretch_pass_has_no_transparency():
    images = [Image.new("RGB", (40, 20), RED), Image.new("RGB", (20, 20), GREEN)]
    out = compose(images, Size(80, 20), ScaleMode.STRETCH)
    assert out.getchannel("A").getextrema()[0] > 250


def test_empty_input_fails():
    with pytest.raises(EmptyInput):
        compose([], Size(10, 10), ScaleMode.PAD)


def test_five_images_fail_without_output():
    images = [Image.new("RGB", (10, 10)) for _ in range(5)]
    with pytest.raises(TooManyTiles) as exc_info:
        compose(images, Size(20, 20), ScaleMode.PAD)
    assert isinstance(exc_info.value, UnsupportedCount)
    assert exc_info.value.count == 5


def test_reference_failure_is_reported(monkeypatch):
    def _fail(images):
        raise NoReferenceFound()

    monkeypatch.setattr(compositor_module, "reference_size", _fail)
    images = [Image.new("RGB", (10, 10)) for _ in range(2)]
    with pytest.raises(ReferenceSelectionFailed):
        compose(images, Size(20, 10), ScaleMode.PAD)
