import pytest
from PIL import Image

from receipt_ledger.core.imaging import contrast_factor, preprocess_image


def test_light_and_dark_pixels_are_separated(tmp_path):
    src = tmp_path / "receipt.png"
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (230, 230, 230))
    img.putpixel((1, 0), (20, 20, 20))
    img.save(src)

    dest = tmp_path / "out" / "receipt_bw.png"
    result = preprocess_image(src, dest)

    assert result.mode == "L"
    assert list(result.getdata()) == [255, 0]
    assert dest.exists()


def test_contrast_factor_is_identity_at_zero():
    assert contrast_factor(0) == pytest.approx(1.0)


def test_unsupported_file_type(tmp_path):
    with pytest.raises(ValueError):
        preprocess_image(tmp_path / "receipt.pdf")
