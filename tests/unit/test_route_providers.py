"""Tests for route providers and the provider registry."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fakes import make_page

from appnav.adapters import ProviderKind, custom_provider, get_route_provider
from appnav.adapters.nextjs import detect_nextjs_dev_port, find_nextjs_routes
from appnav.adapters.sveltekit import detect_sveltekit_dev_port, find_sveltekit_routes
from appnav.crawler.models import FrameworkType

BASE_URL = "http://localhost:3000"


def _touch(root: Path, *paths: str) -> None:
    for relative in paths:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export default function Page() {}\n")


class TestNextjsRoutes:
    def test_app_router(self, tmp_path: Path):
        _touch(
            tmp_path,
            "app/page.tsx",
            "app/about/page.tsx",
            "app/blog/[slug]/page.tsx",
            "app/(marketing)/pricing/page.jsx",
            "app/docs/[...path]/page.ts",
            "app/about/layout.tsx",
            "app/about/page.module.css",
        )
        assert find_nextjs_routes(tmp_path) == [
            "/",
            "/about",
            "/blog/:slug",
            "/docs/*path",
            "/pricing",
        ]

    def test_pages_router(self, tmp_path: Path):
        _touch(
            tmp_path,
            "pages/index.tsx",
            "pages/contact.tsx",
            "pages/users/index.tsx",
            "pages/users/[id].tsx",
            "pages/_app.tsx",
            "pages/_document.tsx",
            "pages/api/hello.ts",
        )
        assert find_nextjs_routes(tmp_path) == ["/", "/contact", "/users", "/users/:id"]

    def test_src_directories(self, tmp_path: Path):
        _touch(tmp_path, "src/app/settings/page.tsx")
        assert find_nextjs_routes(tmp_path) == ["/", "/settings"]

    def test_empty_project(self, tmp_path: Path):
        assert find_nextjs_routes(tmp_path) == ["/"]

    def test_dev_port_from_script(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(
            json.dumps({"scripts": {"dev": "next dev -p 4000"}})
        )
        assert detect_nextjs_dev_port(tmp_path) == 4000

    def test_dev_port_default(self, tmp_path: Path):
        assert detect_nextjs_dev_port(tmp_path) == 3000

    def test_undecodable_config_uses_default_port(self, tmp_path: Path):
        (tmp_path / "next.config.js").write_bytes(b"\xff\xfe port: 4000")
        provider = get_route_provider("nextjs", tmp_path)
        assert provider.get_dev_port() == 3000


class TestSveltekitRoutes:
    def test_routes(self, tmp_path: Path):
        _touch(
            tmp_path,
            "src/routes/+page.svelte",
            "src/routes/about/+page.svelte",
            "src/routes/blog/[slug]/+page.svelte",
            "src/routes/(app)/dashboard/+page.svelte",
            "src/routes/+layout.svelte",
        )
        assert find_sveltekit_routes(tmp_path) == ["/", "/about", "/blog/:slug", "/dashboard"]

    def test_dev_port_from_vite_config(self, tmp_path: Path):
        (tmp_path / "vite.config.ts").write_text("export default { server: { port: 5000 } }")
        assert detect_sveltekit_dev_port(tmp_path) == 5000

    def test_dev_port_default(self, tmp_path: Path):
        assert detect_sveltekit_dev_port(tmp_path) == 5173


class TestRegistry:
    def test_nextjs(self, tmp_path: Path):
        provider = get_route_provider(FrameworkType.NEXTJS, tmp_path)
        assert provider.framework == FrameworkType.NEXTJS
        assert provider.kind == ProviderKind.FILE_BASED
        assert provider.get_dev_port() == 3000

    def test_sveltekit_from_string(self, tmp_path: Path):
        provider = get_route_provider("sveltekit", tmp_path)
        assert provider.kind == ProviderKind.FILE_BASED
        assert provider.get_dev_port() == 5173

    def test_react_and_vue_crawl_links(self, tmp_path: Path):
        react = get_route_provider("react", tmp_path)
        vue = get_route_provider("vue", tmp_path)
        assert react.kind == ProviderKind.LINK_CRAWL
        assert react.get_dev_command() == "npm start"
        assert vue.get_dev_command() == "npm run serve"
        assert vue.get_dev_port() == 8080

    def test_unknown_framework_is_generic(self, tmp_path: Path):
        provider = get_route_provider("ember", tmp_path)
        assert provider.framework == FrameworkType.GENERIC
        assert provider.kind == ProviderKind.LINK_CRAWL

    def test_none_is_generic(self, tmp_path: Path):
        assert get_route_provider(None, tmp_path).framework == FrameworkType.GENERIC

    def test_known_framework_without_provider_keeps_name(self, tmp_path: Path):
        provider = get_route_provider("angular", tmp_path)
        assert provider.framework == FrameworkType.ANGULAR
        assert provider.kind == ProviderKind.LINK_CRAWL

    def test_custom_provider(self, tmp_path: Path):
        provider = custom_provider(
            tmp_path, lambda root: ["/", "/x"], dev_command="make serve", dev_port=9000
        )
        assert provider.kind == ProviderKind.CUSTOM
        assert provider.get_dev_command() == "make serve"
        assert provider.get_dev_port() == 9000
        assert provider.get_build_command() == "npm run build"


class TestProviderDiscovery:
    @pytest.mark.asyncio
    async def test_uses_file_structure(self, tmp_path: Path):
        _touch(tmp_path, "app/page.tsx", "app/about/page.tsx")
        provider = get_route_provider("nextjs", tmp_path)
        page = make_page()

        routes = await provider.discover_routes(page, BASE_URL)

        assert routes == ["/", "/about"]
        page.goto.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_links_when_only_root(self, tmp_path: Path):
        _touch(tmp_path, "app/page.tsx")
        provider = get_route_provider("nextjs", tmp_path)
        page = make_page()
        page.evaluate = AsyncMock(return_value=["/pricing"])

        routes = await provider.discover_routes(page, BASE_URL)

        assert routes == ["/", "/pricing"]

    @pytest.mark.asyncio
    async def test_falls_back_on_os_error(self, tmp_path: Path):
        def unreadable(root):
            raise PermissionError("denied")

        provider = custom_provider(tmp_path, unreadable)
        page = make_page()
        page.evaluate = AsyncMock(return_value=["/a"])

        assert await provider.discover_routes(page, BASE_URL) == ["/", "/a"]

    @pytest.mark.asyncio
    async def test_custom_routes_are_deduplicated(self, tmp_path: Path):
        provider = custom_provider(tmp_path, lambda root: ["/b", "/", "/b"])
        assert await provider.discover_routes(make_page(), BASE_URL) == ["/", "/b"]

    @pytest.mark.asyncio
    async def test_link_crawl_provider(self, tmp_path: Path):
        provider = get_route_provider("react", tmp_path)
        page = make_page()
        page.evaluate = AsyncMock(return_value=["/", "/login"])

        assert await provider.discover_routes(page, BASE_URL) == ["/", "/login"]

    @pytest.mark.asyncio
    async def test_navigate_uses_timeout(self, tmp_path: Path):
        provider = get_route_provider("react", tmp_path)
        page = make_page()

        await provider.navigate_to_route(page, "/login", BASE_URL, timeout_ms=1234)

        page.goto.assert_awaited_once_with(
            f"{BASE_URL}/login", wait_until="networkidle", timeout=1234
        )

    def test_analyze_components(self, tmp_path: Path):
        _touch(tmp_path, "components/Button.tsx")
        provider = get_route_provider("nextjs", tmp_path)
        assert [c.name for c in provider.analyze_components()] == ["Button"]
