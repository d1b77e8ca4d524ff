from pathlib import Path
from urllib.parse import urlparse

import httpx

from uxaudit.analysis.exceptions import FetchError, UnsupportedReferenceError


class ImageFetcher:
    """Reads source image bytes from a URL or from the local files root.

    References with an http(s) scheme are downloaded; references without a
    scheme are resolved relative to files_root.
    """

    FILES_ROOT = Path("/app/files")

    def __init__(
        self,
        files_root: Path | None = None,
        timeout_seconds: float = 30,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    def fetch(self, reference: str) -> bytes:
        """Return raw bytes for the reference.

        Raises:
            FetchError: on HTTP error status, transport failure, timeout or missing file.
            UnsupportedReferenceError: on a scheme other than http, https or a bare path.
        """
        scheme = urlparse(reference).scheme.lower()
        if scheme in ("http", "https"):
            return self._fetch_url(reference)
        if scheme in ("", "file"):
            return self._read_file(reference)
        raise UnsupportedReferenceError(f"Unsupported file reference scheme '{scheme}'")

    def _fetch_url(self, url: str) -> bytes:
        try:
            if self._http_client is not None:
                response = self._http_client.get(url, timeout=self._timeout_seconds)
            else:
                with httpx.Client(
                    timeout=self._timeout_seconds, follow_redirects=True
                ) as client:
                    response = client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching image: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch image: {exc}") from exc

        if response.status_code >= 400:
            raise FetchError(
                f"Failed to fetch image: HTTP {response.status_code} {response.reason_phrase}"
            )
        return response.content

    def _read_file(self, reference: str) -> bytes:
        path = self._resolve_path(reference)
        if not path.is_file():
            raise FetchError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FetchError(f"Failed to read {path}: {exc}") from exc

    def _resolve_path(self, reference: str) -> Path:
        relative = urlparse(reference).path if reference.startswith("file:") else reference
        resolved = (self._files_root / relative.lstrip("/")).resolve()
        root = self._files_root.resolve()
        if root not in resolved.parents and resolved != root:
            raise UnsupportedReferenceError(
                f"File reference '{reference}' escapes the files root"
            )
        return resolved
