import base64
import os
from io import BytesIO

from PIL import Image

from kiattibat.services.uploads import UPLOAD_URL_PREFIX, ingest_image


def _png_b64(size=(4, 4), color="red", fmt="PNG"):
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return base64.b64encode(buf.getvalue()).decode("ascii")


def test_png_stored_under_site_root(app, tmp_path):
    result = ingest_image(_png_b64(), "logo.png")
    assert result.ok
    assert result.file_url == f"{UPLOAD_URL_PREFIX}/{result.file_id}.png"
    assert len(result.file_id) == 24
    stored = tmp_path / "uploads" / "certificates" / f"{result.file_id}.png"
    assert stored.exists()


def test_data_url_prefix_accepted(app):
    result = ingest_image("data:image/jpeg;base64," + _png_b64(fmt="JPEG"), "sig.jpg")
    assert result.ok
    assert result.file_url.endswith(".jpg")


def test_same_bytes_same_id(app):
    payload = _png_b64(color="blue")
    first = ingest_image(payload, "a.png")
    second = ingest_image(payload, "b.png")
    assert first.file_id == second.file_id


def test_non_image_rejected(app, tmp_path):
    payload = base64.b64encode(b"not an image at all").decode("ascii")
    result = ingest_image(payload, "x.png")
    assert not result.ok
    assert result.to_dict()["status"] == "error"
    assert result.to_dict()["fileUrl"] == ""
    assert not os.path.exists(tmp_path / "uploads" / "certificates")


def test_invalid_base64_rejected(app):
    result = ingest_image("!!!not-base64!!!", "x.png")
    assert not result.ok
    assert "base64" in result.message


def test_empty_payload_and_bad_name_rejected(app):
    assert not ingest_image("", "x.png").ok
    assert not ingest_image(_png_b64(), "../").ok


def test_unsupported_format_rejected(app):
    result = ingest_image(_png_b64(fmt="BMP"), "x.bmp")
    assert not result.ok
    assert "PNG" in result.message


def test_decompression_bomb_rejected(app, monkeypatch, tmp_path):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    result = ingest_image(_png_b64(size=(40, 40)), "huge.png")
    assert not result.ok
    assert result.message == "Image dimensions are too large."
    assert not os.path.exists(tmp_path / "uploads" / "certificates")


def test_oversized_dimensions_rejected(app, monkeypatch):
    monkeypatch.setattr("kiattibat.services.uploads.MAX_DIMENSION", 10)
    result = ingest_image(_png_b64(size=(20, 5)), "wide.png")
    assert not result.ok
    assert result.message == "Image dimensions are too large."
