"""Fetch and decode the images of a post from the CDN."""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlparse

import httpx
from PIL import Image, UnidentifiedImageError

from .errors import FetchError, NoImagesFound, TooManyTiles
from .layout import MAX_TILES

logger = logging.getLogger(__name__)


class ImageSize(str, Enum):
    THUMBNAIL = "thumbnail"
    FULLSIZE = "fullsize"


def _default_headers() -> Dict[str, str]:
    return {
        "Accept": "*/*",
        "Accept-Encoding": "gzip, deflate",
        "Accept-Language": "en",
        "Referer": "https://bsky.app",
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Gecko/20100101 Firefox/133.0",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Site": "same-site",
    }


@dataclass(frozen=True)
class FetchConfig:
    url_template: str = "https://cdn.bsky.app/img/feed_{size}/plain/{did}/{image_id}@jpeg"
    headers: Dict[str, str] = field(default_factory=_default_headers)
    timeout: float = 5.0
    max_images: int = MAX_TILES


def image_url(did: str, image_id: str, size: ImageSize = ImageSize.FULLSIZE, config: Optional[FetchConfig] = None) -> str:
    config = config or FetchConfig()
    return config.url_template.format(size=ImageSize(size).value, did=did, image_id=image_id)


def parse_image_ids(path: str) -> List[str]:
    """Split a ``id1/id2/...`` path segment, ignoring empty parts."""

    return [part for part in path.split("/") if part]


def gallery_path(fullsize_urls: Sequence[str]) -> str:
    """Build ``did/id1/id2/...`` from full-size CDN image URLs.

    The first URL contributes its author DID and image id, later URLs only
    their image id. ``@jpeg`` suffixes are stripped.
    """
    parts: List[str] = []
    for i, url in enumerate(fullsize_urls):
        segments = [s for s in urlparse(url).path.split("/") if s]
        keep = segments[-2:] if i == 0 else segments[-1:]
        parts.extend(s.replace("@jpeg", "") for s in keep)
    return "/".join(parts)


def decode_image(data: bytes, url: str = "<memory>") -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise FetchError(url, f"undecodable image data ({exc})") from exc
    return image


class ImageFetcher:
    """Downloads post images over a shared ``httpx.Client``.

    A client passed in is left open on close(); one created here is owned
    and closed by the fetcher.
    """

    def __init__(self, config: Optional[FetchConfig] = None, client: Optional[httpx.Client] = None) -> None:
        self.config = config or FetchConfig()
        self._owns_client = client is None
        self.client = client or httpx.Client(
            headers=self.config.headers,
            timeout=self.config.timeout,
            follow_redirects=True,
        )

    def __enter__(self) -> "ImageFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def fetch_image(self, did: str, image_id: str, size: ImageSize = ImageSize.FULLSIZE) -> Image.Image:
        url = image_url(did, image_id, size, self.config)
        logger.debug("Fetching image from %s", url)
        try:
            response = self.client.get(url, headers=self.config.headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(url, str(exc)) from exc
        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return decode_image(response.content, url)

    def _fetch_or_none(self, did: str, image_id: str, size: ImageSize) -> Optional[Image.Image]:
        try:
            return self.fetch_image(did, image_id, size)
        except FetchError as exc:
            logger.warning("Dropping image %s: %s", image_id, exc.reason)
            return None

    def fetch_images(self, did: str, image_ids: Sequence[str], size: ImageSize = ImageSize.FULLSIZE) -> List[Image.Image]:
        """Fetch every image of a post, in order, skipping ones that fail.

        Raises TooManyTiles before any request when more than
        ``config.max_images`` ids are given, and NoImagesFound when none
        could be fetched.
        """
        ids = list(image_ids)
        if not ids:
            raise NoImagesFound()
        if len(ids) > self.config.max_images:
            raise TooManyTiles(len(ids))
        with ThreadPoolExecutor(max_workers=len(ids)) as ex:
            results = list(ex.map(lambda image_id: self._fetch_or_none(did, image_id, size), ids))
        images = [image for image in results if image is not None]
        if not images:
            raise NoImagesFound()
        return images
