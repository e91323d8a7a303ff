"""On-demand download of third-party theme assets.

jQuery, highlight.js and the FontAwesome icon font are not shipped with the
package. They are fetched once from public CDNs and kept in the user cache
directory, then read from there on later renders.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

import requests

from .exceptions import ThemeError


_log = logging.getLogger(__name__)

_FONT_AWESOME = "https://cdn.jsdelivr.net/npm/font-awesome@4.7.0"
_FONT_AWESOME_MIRROR = "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/4.7.0"


@dataclass(frozen=True, slots=True)
class VendorAsset:
    """Remote file identified by its theme-relative path."""

    path: str
    urls: tuple[str, ...]


VENDOR_ASSETS: dict[str, VendorAsset] = {
    asset.path: asset
    for asset in (
        VendorAsset(
            "jquery.js",
            (
                "https://code.jquery.com/jquery-2.1.4.min.js",
                "https://cdnjs.cloudflare.com/ajax/libs/jquery/2.1.4/jquery.min.js",
            ),
        ),
        VendorAsset(
            "highlight.js",
            (
                "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/highlight.min.js",
                "https://cdn.jsdelivr.net/gh/highlightjs/cdn-release@11.9.0/build/highlight.min.js",
            ),
        ),
        VendorAsset(
            "_FontAwesome/css/font-awesome.css",
            (
                f"{_FONT_AWESOME}/css/font-awesome.css",
                f"{_FONT_AWESOME_MIRROR}/css/font-awesome.css",
            ),
        ),
        *(
            VendorAsset(
                f"_FontAwesome/fonts/fontawesome-webfont.{extension}",
                (
                    f"{_FONT_AWESOME}/fonts/fontawesome-webfont.{extension}",
                    f"{_FONT_AWESOME_MIRROR}/fonts/fontawesome-webfont.{extension}",
                ),
            )
            for extension in ("eot", "svg", "ttf", "woff", "woff2")
        ),
    )
}


def vendor_cache_dir() -> Path:
    """Return the directory holding downloaded vendor assets."""
    env_cache = os.environ.get("FOLIO_CACHE_DIR")
    if env_cache:
        return Path(env_cache).expanduser() / "vendor"
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / "folio" / "vendor"
    return Path.home() / ".cache" / "folio" / "vendor"


class VendorAssetFetcher:
    """Retrieve vendor assets, downloading them into the cache when missing."""

    _DEFAULT_USER_AGENT = "folio-theme-fetcher"

    def __init__(
        self,
        *,
        cache_dir: Path | None = None,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.cache_dir = cache_dir or vendor_cache_dir()
        self._session = session
        self._timeout = timeout

    def cached_path(self, path: str) -> Path:
        return self.cache_dir / path

    def fetch(self, path: str) -> bytes:
        """Return the bytes of the vendor asset stored at theme-relative ``path``."""
        asset = VENDOR_ASSETS.get(path)
        if asset is None:
            raise ThemeError(f"'{path}' is not a known vendor asset.")

        target = self.cached_path(path)
        if target.is_file():
            return target.read_bytes()

        payload = self._download(asset)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as exc:
            _log.warning("Unable to cache vendor asset '%s': %s", target, exc)
        else:
            _log.info("Downloaded vendor asset %s", path)
        return payload

    def _download(self, asset: VendorAsset) -> bytes:
        attempts: list[str] = []
        client = self._session or requests.Session()
        headers = {"User-Agent": self._DEFAULT_USER_AGENT}
        for url in asset.urls:
            try:
                response = client.get(url, headers=headers, timeout=self._timeout)
            except requests.RequestException as exc:
                attempts.append(f"{url}: {exc}")
                continue
            if response.status_code >= 400:
                attempts.append(f"{url}: HTTP {response.status_code}")
                continue
            if not response.content:
                attempts.append(f"{url}: empty response")
                continue
            return response.content
        detail = "; ".join(attempts) if attempts else "no candidate URL"
        raise ThemeError(f"Unable to download vendor asset '{asset.path}': {detail}")


__all__ = ["VENDOR_ASSETS", "VendorAsset", "VendorAssetFetcher", "vendor_cache_dir"]
