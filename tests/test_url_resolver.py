"""
Tests for URL prefix parsing and request URL resolution.
"""
from urllib.parse import urlsplit

import httpx
import pytest

from fetch_connection import Connection
from fetch_connection.encoders import FlatParamsEncoder
from fetch_connection.errors import InvalidURLError
from fetch_connection.url import RequestURL, UrlPrefix, UrlResolver, join_path, normalize_path_prefix


class TestUrlPrefix:
    def test_simple_url(self):
        """Should parse scheme, host and default port."""
        prefix = UrlPrefix.parse("http://sushi.com")
        assert prefix.scheme == "http"
        assert prefix.host == "sushi.com"
        assert prefix.port == 80
        assert prefix.explicit_port is None
        assert prefix.path == "/"

    def test_complex_url(self):
        """Explicit port and path are kept."""
        prefix = UrlPrefix.parse("https://sushi.com:815/fish")
        assert prefix.port == 815
        assert prefix.path == "/fish"
        assert str(prefix) == "https://sushi.com:815/fish"

    def test_https_default_port(self):
        """HTTPS defaults to port 443."""
        assert UrlPrefix.parse("https://sushi.com").port == 443

    def test_invalid_port(self):
        """Non-numeric port raises."""
        with pytest.raises(InvalidURLError):
            UrlPrefix.parse("http://sushi.com:notaport/")


@pytest.mark.parametrize("value, expected", [
    (None, "/"),
    ("", "/"),
    ("/", "/"),
    ("fish", "/fish"),
    ("/fish", "/fish"),
    ("/fish/", "/fish"),
])
def test_normalize_path_prefix(value, expected):
    """Leading slash added, trailing slash dropped except for root."""
    assert normalize_path_prefix(value) == expected


def test_join_path_resolves_dot_segments():
    """Dot segments are resolved."""
    assert join_path("/a/b", "../c") == "/a/c"
    assert join_path("/a/b", "./c") == "/a/b/c"
    assert join_path("/a/b", "") == "/a/b"


class TestUrlResolver:
    resolver = UrlResolver()

    def test_relative_path_joins_prefix(self):
        """Relative paths join the prefix path."""
        url = self.resolver.resolve(UrlPrefix.parse("http://sushi.com/fish"), "sake.html")
        assert str(url) == "http://sushi.com/fish/sake.html"

    def test_absolute_url_wins(self):
        """Absolute URLs replace scheme, host and port."""
        prefix = UrlPrefix.parse("https://sushi.com:23/fish")
        url = self.resolver.resolve(prefix, "http://other.com/sake.html?a=1")
        assert (url.scheme, url.host, url.port, url.path, url.query) == (
            "http", "other.com", 80, "/sake.html", "a=1"
        )

    def test_network_path_reference_keeps_scheme(self):
        """Scheme-relative URLs keep the prefix scheme."""
        url = self.resolver.resolve(UrlPrefix.parse("https://sushi.com"), "//cdn.sushi.com/x.js")
        assert str(url) == "https://cdn.sushi.com/x.js"

    def test_query_precedence(self):
        """Explicit params beat url query which beats base params."""
        url = self.resolver.resolve(
            UrlPrefix.parse("http://sushi.com"),
            "/menu?a=url&b=url",
            params={"b": "explicit"},
            base_params={"a": "base", "c": "base"},
        )
        assert url.query == "a=url&c=base&b=explicit"

    def test_raw_query_kept_when_nothing_to_merge(self):
        """Url query is kept verbatim when nothing merges."""
        url = self.resolver.resolve(UrlPrefix.parse("http://sushi.com"), "/menu?q=%7Eroll")
        assert url.query == "q=%7Eroll"

    def test_raw_query_not_decoded_by_resolve(self):
        """Queries that do not map to params still pass through."""
        url = self.resolver.resolve(UrlPrefix.parse("http://sushi.com"), "/menu?a=1&a[b]=2")
        assert url.query == "a=1&a[b]=2"

    def test_uses_given_encoder(self):
        """Should encode with the resolver's encoder."""
        resolver = UrlResolver(FlatParamsEncoder())
        url = resolver.resolve(UrlPrefix.parse("http://sushi.com"), params={"a": [1, 2]})
        assert url.query == "a=1&a=2"

    def test_missing_host(self):
        """No host anywhere raises."""
        with pytest.raises(InvalidURLError):
            self.resolver.resolve(UrlPrefix(), "sake.html")

    def test_scheme_without_host(self):
        """Absolute URL without host raises."""
        with pytest.raises(InvalidURLError, match="no host"):
            self.resolver.resolve(UrlPrefix.parse("http://sushi.com"), "mailto:chef")

    def test_resolve_with_params_returns_merged_mapping(self):
        """Should return the merged params with the URL."""
        url, params = self.resolver.resolve_with_params(
            UrlPrefix.parse("http://sushi.com"), "/menu?a=url", params={"b": 2}, base_params={"a": "base"}
        )
        assert url.query == "a=url&b=2"
        assert params == {"a": "url", "b": 2}

    def test_request_url_renders_ipv6_and_port(self):
        """IPv6 hosts are bracketed."""
        url = RequestURL(scheme="http", host="::1", port=8080, path="/x")
        assert str(url) == "http://[::1]:8080/x"
        assert url.to_httpx() == httpx.URL("http://[::1]:8080/x")


class TestBuildExclusiveUrl:
    @pytest.fixture
    def conn(self):
        return Connection()

    def test_uses_connection_host_as_default_host(self, conn):
        """Connection host is used for relative URLs."""
        conn.host = "sushi.com"
        uri = conn.build_exclusive_url("sake.html")
        assert uri.host == "sushi.com"
        assert uri.scheme == "http"

    @pytest.mark.parametrize("prefix, expected", [
        ("/fish", "/fish/sake.html"),
        ("/", "/sake.html"),
        ("fish", "/fish/sake.html"),
        ("/fish/", "/fish/sake.html"),
    ])
    def test_relative_path(self, conn, prefix, expected):
        """Relative paths join the path prefix."""
        conn.host = "sushi.com"
        conn.path_prefix = prefix
        assert conn.build_exclusive_url("sake.html").path == expected

    @pytest.mark.parametrize("prefix", ["/fish", "/", "fish", "/fish/"])
    def test_absolute_path(self, conn, prefix):
        """Absolute paths replace the path prefix."""
        conn.host = "sushi.com"
        conn.path_prefix = prefix
        assert conn.build_exclusive_url("/sake.html").path == "/sake.html"

    def test_complete_url(self, conn):
        """Complete URLs are used as given."""
        uri = conn.build_exclusive_url("http://sushi.com/sake.html?a=1")
        assert uri.scheme == "http"
        assert uri.host == "sushi.com"
        assert uri.port == 80
        assert uri.path == "/sake.html"
        assert uri.query == "a=1"

    def test_overrides_connection_port_for_absolute_url(self, conn):
        """Absolute URL ignores the connection port."""
        conn.port = 23
        assert conn.build_exclusive_url("http://sushi.com").port == 80

    def test_relative_url_keeps_connection_port(self, conn):
        """Relative URL keeps the connection port."""
        conn.host = "sushi.com"
        conn.port = 23
        assert str(conn.build_exclusive_url("sake.html")) == "http://sushi.com:23/sake.html"

    @pytest.mark.parametrize("url", [None, ""])
    def test_does_not_add_ending_slash(self, conn, url):
        """No trailing slash is added to the prefix."""
        conn.url_prefix = "http://sushi.com/nigiri"
        assert conn.build_exclusive_url(url).path == "/nigiri"

    def test_does_not_use_connection_params(self, conn):
        """Connection params are ignored."""
        conn.url_prefix = "http://sushi.com/nigiri"
        conn.params = {"a": 1}
        assert str(conn.build_exclusive_url()) == "http://sushi.com/nigiri"

    def test_allows_params_argument(self, conn):
        """Explicit params are encoded."""
        conn.url_prefix = "http://sushi.com/nigiri"
        conn.params = {"a": 1}
        assert str(conn.build_exclusive_url(None, {"a": 2})) == "http://sushi.com/nigiri?a=2"

    def test_empty_params_argument_matches_omitted(self, conn):
        """Empty params behave like no params."""
        conn.url_prefix = "http://sushi.com/nigiri"
        assert conn.build_exclusive_url("x?b=1", {}) == conn.build_exclusive_url("x?b=1")

    def test_handles_uri_instances(self, conn):
        """Parsed URL objects are accepted."""
        conn.host = "sushi.com"
        assert conn.build_exclusive_url(urlsplit("/sake.html")).path == "/sake.html"
        assert conn.build_exclusive_url(httpx.URL("/sake.html")).path == "/sake.html"

    def test_raises_without_host(self, conn):
        """No host raises."""
        with pytest.raises(InvalidURLError):
            conn.build_exclusive_url("sake.html")

    def test_escapes_path(self, conn):
        """Unsafe path characters are percent-encoded."""
        conn.url_prefix = "http://sushi.com/nigiri"
        assert str(conn.build_exclusive_url("a b.html")) == "http://sushi.com/nigiri/a%20b.html"
        assert conn.build_exclusive_url("\u5bff\u53f8").path == "/nigiri/%E5%AF%BF%E5%8F%B8"

    def test_keeps_existing_escapes(self, conn):
        """Existing escapes and sub-delimiters are kept."""
        conn.url_prefix = "http://sushi.com/nigiri"
        assert conn.build_exclusive_url("a%20b.html").path == "/nigiri/a%20b.html"
        assert conn.build_exclusive_url("/tuna;v=1/maki:roll").path == "/tuna;v=1/maki:roll"


class TestUrlPrefixedConnection:
    @pytest.fixture
    def conn(self):
        return Connection("http://sushi.com/sushi/")

    def test_parses_url_and_changes_scheme(self, conn):
        """Scheme can be changed after parsing."""
        conn.scheme = "https"
        assert str(conn.build_exclusive_url("sake.html")) == "https://sushi.com/sushi/sake.html"

    def test_joins_url_to_base_with_ending_slash(self, conn):
        """Relative path joins a prefix ending in a slash."""
        assert str(conn.build_exclusive_url("sake.html")) == "http://sushi.com/sushi/sake.html"

    def test_used_default_base_with_ending_slash(self, conn):
        """Prefix trailing slash is kept in the URL."""
        assert str(conn.build_exclusive_url()) == "http://sushi.com/sushi/"

    def test_overrides_base(self, conn):
        """Absolute path replaces the prefix."""
        assert str(conn.build_exclusive_url("/sake/")) == "http://sushi.com/sake/"

    def test_path_prefix_is_normalized(self, conn):
        """path_prefix drops the trailing slash."""
        assert conn.path_prefix == "/sushi"


class TestBuildUrl:
    @pytest.fixture
    def conn(self):
        return Connection("http://sushi.com/nigiri")

    def test_uses_params(self, conn):
        """Connection params are added."""
        conn.params = {"a": 1, "b": 1}
        assert str(conn.build_url()) == "http://sushi.com/nigiri?a=1&b=1"

    def test_merges_params(self, conn):
        """Explicit params override connection params."""
        conn.params = {"a": 1, "b": 1}
        assert str(conn.build_url(None, {"b": 2, "c": 3})) == "http://sushi.com/nigiri?a=1&b=2&c=3"

    def test_merges_url_query(self, conn):
        """Url query merges with connection params."""
        conn.params = {"a": 1}
        assert str(conn.build_url("maki?b=2")) == "http://sushi.com/nigiri/maki?a=1&b=2"

    def test_absolute_url_still_gets_connection_params(self, conn):
        """Absolute URLs still get connection params."""
        conn.params = {"key": "k"}
        assert str(conn.build_url("https://other.com/x")) == "https://other.com/x?key=k"
