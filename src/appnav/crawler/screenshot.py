"""Screenshot manager — capture route screenshots to uniquely named files."""

from __future__ import annotations

import re
import time
from pathlib import Path

import logfire
from playwright.async_api import Page

from appnav.core.config import ScreenshotOptions, ScreenshotType


class ScreenshotManager:
    """Captures full-page screenshots into the run's screenshot directory."""

    def __init__(self, output_dir: Path, options: ScreenshotOptions | None = None) -> None:
        self._options = options or ScreenshotOptions()
        self._output_dir = output_dir
        self._reserved: set[Path] = set()

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def capture_type(self) -> str:
        """Format actually requested from Playwright.

        Playwright encodes png and jpeg only, so webp is captured as png.
        """
        if self._options.type == ScreenshotType.JPEG:
            return "jpeg"
        return "png"

    @property
    def extension(self) -> str:
        return "jpg" if self.capture_type == "jpeg" else "png"

    def screenshot_kwargs(self, path: Path) -> dict:
        """Build keyword arguments for page.screenshot()."""
        kwargs: dict = {
            "path": str(path),
            "type": self.capture_type,
            "full_page": self._options.full_page,
            "animations": self._options.animations,
        }
        if self.capture_type == "jpeg" and self._options.quality is not None:
            kwargs["quality"] = self._options.quality
        if self._options.clip is not None:
            kwargs["clip"] = self._options.clip.model_dump()
        return kwargs

    async def capture_to_file(self, page: Page, route: str) -> Path:
        """Capture the current page and write it under a collision-free name.

        Returns the path of the written file.
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._unique_path(route)

        await page.screenshot(**self.screenshot_kwargs(path))

        logfire.info("Screenshot saved", route=route, path=str(path))
        return path

    def route_to_filename(self, route: str, timestamp_ms: int | None = None) -> str:
        """Generate a file name from a route and a millisecond timestamp.

        Examples:
            / → home_1700000000000.png
            /settings/general → settings_general_1700000000000.png
            /users/:id → users_id_1700000000000.png
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)

        slug = re.sub(r"[^a-zA-Z0-9-]+", "_", route).strip("_").lower()
        if not slug:
            slug = "home"
        if len(slug) > 80:
            slug = slug[:80].rstrip("_")

        return f"{slug}_{timestamp_ms}.{self.extension}"

    def _unique_path(self, route: str) -> Path:
        filename = self.route_to_filename(route)
        path = self._output_dir / filename
        counter = 1
        while path in self._reserved or path.exists():
            stem, ext = filename.rsplit(".", 1)
            path = self._output_dir / f"{stem}-{counter}.{ext}"
            counter += 1
        self._reserved.add(path)
        return path
