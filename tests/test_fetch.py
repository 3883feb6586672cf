import io

import httpx
import pytest
from PIL import Image

from mosaic.errors import FetchError, NoImagesFound, TooManyTiles
from mosaic.fetch import FetchConfig, ImageFetcher, ImageSize, gallery_path, image_url, parse_image_ids

DID = "did:plc:abc123"


def _png(size, color):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


PAYLOADS = {
    "red": _png((20, 10), (255, 0, 0)),
    "green": _png((10, 20), (0, 255, 0)),
}


def _handler(request: httpx.Request) -> httpx.Response:
    image_id = request.url.path.rsplit("/", 1)[-1].replace("@jpeg", "")
    if image_id == "junk":
        return httpx.Response(200, content=b"not an image")
    if image_id not in PAYLOADS:
        return httpx.Response(404)
    return httpx.Response(200, content=PAYLOADS[image_id])


def _fetcher():
    client = httpx.Client(transport=httpx.MockTransport(_handler))
    return ImageFetcher(client=client)


def test_image_url_uses_size_and_ids():
    assert image_url(DID, "xyz", ImageSize.THUMBNAIL) == (
        "https://cdn.bsky.app/img/feed_thumbnail/plain/did:plc:abc123/xyz@jpeg"
    )
    custom = FetchConfig(url_template="http://cdn.test/{size}/{did}/{image_id}")
    assert image_url(DID, "xyz", "fullsize", custom) == "http://cdn.test/fullsize/did:plc:abc123/xyz"


def test_parse_image_ids_drops_empty_segments():
    assert parse_image_ids("a//b/") == ["a", "b"]
    assert parse_image_ids("") == []


def test_gallery_path_from_fullsize_urls():
    urls = [
        "https://cdn.bsky.app/img/feed_fullsize/plain/did:plc:abc123/first@jpeg",
        "https://cdn.bsky.app/img/feed_fullsize/plain/did:plc:abc123/second@jpeg",
    ]
    assert gallery_path(urls) == "did:plc:abc123/first/second"


def test_fetch_images_keeps_order():
    with _fetcher() as fetcher:
        images = fetcher.fetch_images(DID, ["green", "red"])
    assert [im.size for im in images] == [(10, 20), (20, 10)]


def test_fetch_images_drops_failures(caplog):
    with _fetcher() as fetcher:
        images = fetcher.fetch_images(DID, ["missing", "red", "junk"])
    assert [im.size for im in images] == [(20, 10)]
    assert "missing" in caplog.text


def test_fetch_images_with_nothing_decoded_fails():
    with _fetcher() as fetcher:
        with pytest.raises(NoImagesFound):
            fetcher.fetch_images(DID, ["missing", "junk"])
        with pytest.raises(NoImagesFound):
            fetcher.fetch_images(DID, [])


def test_fetch_image_http_error():
    with _fetcher() as fetcher:
        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch_image(DID, "missing")
    assert "missing@jpeg" in exc_info.value.url


def test_fetch_sends_configured_headers():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, content=PAYLOADS["red"])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    ImageFetcher(client=client).fetch_image(DID, "red")
    assert seen["user-agent"].startswith("Mozilla/5.0")
    assert seen["referer"] == "https://bsky.app"


def test_borrowed_client_is_left_open():
    client = httpx.Client(transport=httpx.MockTransport(_handler))
    with ImageFetcher(client=client):
        pass
    assert not client.is_closed
    client.close()


def test_fetch_images_rejects_more_than_max_images_before_requesting():
    calls = []

    def handler(request):
        calls.append(request.url)
        return httpx.Response(200, content=PAYLOADS["red"])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    fetcher = ImageFetcher(client=client)
    assert fetcher.config.max_images == 4
    with pytest.raises(TooManyTiles):
        fetcher.fetch_images(DID, ["red"] * 5)
    assert calls == []


def test_max_images_is_configurable():
    client = httpx.Client(transport=httpx.MockTransport(_handler))
    fetcher = ImageFetcher(FetchConfig(max_images=1), client=client)
    with pytest.raises(TooManyTiles):
        fetcher.fetch_images(DID, ["red", "green"])
