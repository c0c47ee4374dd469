"""Tests for latest-version sources."""

from __future__ import annotations

import json

import pytest

from goupgrade.bootstrap.platform import PlatformInfo
from goupgrade.bootstrap.sources import (
    DEFAULT_JSON_FEED_URL,
    DEFAULT_LISTING_URL,
    JsonFeedSource,
    ListingPageSource,
    create_version_source,
)
from goupgrade.core.errors import HTTPStatusError, NetworkError, NotFoundError

LISTING_PAGE = b"""<!DOCTYPE html>
<html>
<body>
<h2>Featured downloads</h2>
<a class="download downloadBox" href="/dl/go1.23.1.windows-amd64.msi">
<span class="filename">go1.23.1.windows-amd64.msi</span>
</a>
<a class="download downloadBox" href="/dl/go1.23.1.linux-amd64.tar.gz">
<div class="platform">Linux</div>
<span class="filename">go1.23.1.linux-amd64.tar.gz</span>
</a>
<tr class="highlight"><td class="filename"><a class="download" href="/dl/go1.22.7.linux-amd64.tar.gz">go1.22.7.linux-amd64.tar.gz</a></td></tr>
<span class="filename">go1.22.7.linux-amd64.tar.gz</span>
</body>
</html>
"""

FEED = [
    {
        "version": "go1.24rc1",
        "stable": False,
        "files": [{"os": "linux", "arch": "amd64", "kind": "archive"}],
    },
    {
        "version": "go1.23.1",
        "stable": True,
        "files": [
            {"os": "darwin", "arch": "arm64", "kind": "archive"},
            {"os": "linux", "arch": "amd64", "kind": "archive"},
            {"os": "linux", "arch": "amd64", "kind": "source"},
        ],
    },
    {
        "version": "go1.22.7",
        "stable": True,
        "files": [{"os": "linux", "arch": "amd64", "kind": "archive"}],
    },
]


class TestListingPageSource:
    """Tests for scraping the HTML listing."""

    def test_returns_first_matching_version(self, fake_client) -> None:
        client = fake_client({DEFAULT_LISTING_URL: LISTING_PAGE})
        source = ListingPageSource(client)
        assert source.latest_version() == "go1.23.1"
        assert client.calls == [DEFAULT_LISTING_URL]

    def test_no_matching_line_raises_not_found(self, fake_client) -> None:
        client = fake_client({DEFAULT_LISTING_URL: b"<html><body>maintenance</body></html>"})
        with pytest.raises(NotFoundError, match="linux-amd64"):
            ListingPageSource(client).latest_version()

    def test_empty_body_raises_not_found(self, fake_client) -> None:
        client = fake_client({DEFAULT_LISTING_URL: b""})
        with pytest.raises(NotFoundError):
            ListingPageSource(client).latest_version()

    def test_network_errors_propagate(self, fake_client) -> None:
        client = fake_client({DEFAULT_LISTING_URL: NetworkError("offline")})
        with pytest.raises(NetworkError):
            ListingPageSource(client).latest_version()

    def test_status_errors_propagate(self, fake_client) -> None:
        client = fake_client({DEFAULT_LISTING_URL: HTTPStatusError(DEFAULT_LISTING_URL, 503)})
        with pytest.raises(HTTPStatusError):
            ListingPageSource(client).latest_version()

    def test_custom_url(self, fake_client) -> None:
        url = "https://mirror.example.com/golang/"
        client = fake_client({url: LISTING_PAGE})
        source = ListingPageSource(client, url=url)
        assert source.latest_version() == "go1.23.1"
        assert source.location == url

    def test_other_platform(self, fake_client) -> None:
        page = b'<span class="filename">go1.23.1.linux-arm64.tar.gz</span>\n'
        client = fake_client({DEFAULT_LISTING_URL: page})
        source = ListingPageSource(client, platform_info=PlatformInfo(os="linux", arch="arm64"))
        assert source.latest_version() == "go1.23.1"


class TestExtractVersion:
    """Tests for ListingPageSource.extract_version."""

    @pytest.fixture
    def source(self, fake_client) -> ListingPageSource:
        return ListingPageSource(fake_client({}))

    def test_matching_line(self, source: ListingPageSource) -> None:
        line = '<span class="filename">go1.21.13.linux-amd64.tar.gz</span>'
        assert source.extract_version(line) == "go1.21.13"

    def test_requires_tag_marker(self, source: ListingPageSource) -> None:
        assert source.extract_version('<a href="/dl/go1.23.1.linux-amd64.tar.gz">') is None

    def test_requires_platform_suffix(self, source: ListingPageSource) -> None:
        assert source.extract_version('<span class="filename">go1.23.1.src.tar.gz</span>') is None

    def test_requires_archive_name(self, source: ListingPageSource) -> None:
        line = '<span class="platform">linux-amd64</span>'
        assert source.extract_version(line) is None

    def test_name(self, source: ListingPageSource) -> None:
        assert source.name == "html"


class TestJsonFeedSource:
    """Tests for the JSON release feed."""

    def test_returns_first_stable_with_archive(self, fake_client) -> None:
        client = fake_client({DEFAULT_JSON_FEED_URL: json.dumps(FEED).encode()})
        assert JsonFeedSource(client).latest_version() == "go1.23.1"

    def test_skips_releases_without_platform_archive(self, fake_client) -> None:
        feed = [
            {"version": "go1.23.1", "stable": True, "files": [{"os": "linux", "arch": "amd64", "kind": "source"}]},
            {"version": "go1.22.7", "stable": True, "files": [{"os": "linux", "arch": "amd64", "kind": "archive"}]},
        ]
        client = fake_client({DEFAULT_JSON_FEED_URL: json.dumps(feed).encode()})
        assert JsonFeedSource(client).latest_version() == "go1.22.7"

    def test_no_stable_release_raises_not_found(self, fake_client) -> None:
        client = fake_client({DEFAULT_JSON_FEED_URL: json.dumps(FEED[:1]).encode()})
        with pytest.raises(NotFoundError, match="no stable"):
            JsonFeedSource(client).latest_version()

    def test_invalid_json_raises_not_found(self, fake_client) -> None:
        client = fake_client({DEFAULT_JSON_FEED_URL: b"<html>not json</html>"})
        with pytest.raises(NotFoundError, match="invalid release feed"):
            JsonFeedSource(client).latest_version()

    def test_non_list_raises_not_found(self, fake_client) -> None:
        client = fake_client({DEFAULT_JSON_FEED_URL: b'{"version": "go1.23.1"}'})
        with pytest.raises(NotFoundError, match="expected a list"):
            JsonFeedSource(client).latest_version()

    def test_name(self, fake_client) -> None:
        assert JsonFeedSource(fake_client({})).name == "json"


class TestCreateVersionSource:
    """Tests for create_version_source."""

    def test_html(self, fake_client) -> None:
        source = create_version_source("html", fake_client({}), listing_url="https://x/")
        assert isinstance(source, ListingPageSource)
        assert source.location == "https://x/"

    def test_json(self, fake_client) -> None:
        source = create_version_source("json", fake_client({}))
        assert isinstance(source, JsonFeedSource)
        assert source.location == DEFAULT_JSON_FEED_URL

    def test_unknown_raises(self, fake_client) -> None:
        with pytest.raises(ValueError, match="Unknown version source"):
            create_version_source("rss", fake_client({}))
