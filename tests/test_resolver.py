"""Tests for Host parsing and path confinement."""

import os

import pytest

from static_server.exceptions import PathTraversal
from static_server.resolver import (
    ResolvedPath,
    confine_real_path,
    is_within,
    parse_host_address,
    parse_host_port,
    resolve_path,
    target_path,
)

HOST = "example.com"


class TestParseHostAddress:
    """Host header values of the form [http://]name[:port][/...]."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("example.com", "example.com"),
            ("example.com:9000", "example.com"),
            ("http://example.com", "example.com"),
            ("http://example.com:80/some/path", "example.com"),
            ("  example.com  ", "example.com"),
            ("[::1]:8080", "[::1]"),
        ],
    )
    def test_extracts_name(self, value, expected) -> None:
        """Scheme, path and port are stripped."""
        assert parse_host_address(value) == expected

    @pytest.mark.parametrize("value", [None, "", ":8080", "..", ".", "a\\b", "bad host", "[::1"])
    def test_unusable_names(self, value) -> None:
        """Names that cannot be a single directory segment are rejected."""
        assert parse_host_address(value) is None

    def test_port(self) -> None:
        """The numeric port is returned when present."""
        assert parse_host_port("example.com:9000") == "9000"
        assert parse_host_port("http://example.com:9000/x") == "9000"
        assert parse_host_port("[::1]:8080") == "8080"
        assert parse_host_port("example.com") is None
        assert parse_host_port("example.com:abc") is None
        assert parse_host_port(None) is None


class TestIsWithin:
    """Component-wise containment."""

    def test_descendant(self) -> None:
        """A child path is inside its parent."""
        base = os.path.abspath("srv")
        assert is_within(base, os.path.join(base, "a", "b"))
        assert is_within(base, base)

    def test_sibling_with_common_prefix(self) -> None:
        """A sibling sharing a string prefix is outside."""
        base = os.path.abspath("srv")
        assert not is_within(base, base + "2")


class TestResolvePath:
    """Lexical walk of the request path."""

    def test_simple_file(self, docroot) -> None:
        """A plain resource lands under the host directory."""
        resolved = resolve_path(str(docroot), HOST, "/index.html")
        root = os.path.join(os.path.realpath(docroot), HOST)
        assert resolved == ResolvedPath(root, os.path.join(root, "index.html"))

    def test_dot_segments_inside_root(self, docroot) -> None:
        """`.` is ignored and `..` pops without leaving the root."""
        resolved = resolve_path(str(docroot), HOST, "/./docs/../index.html")
        assert resolved.path == os.path.join(os.path.realpath(docroot), HOST, "index.html")

    @pytest.mark.parametrize(
        "resource",
        [
            "/../../etc/passwd",
            "/..",
            "/docs/../../secret.txt",
            "/docs/../../../secret.txt",
            "//etc/passwd",
            "/%2e%2e/%2e%2e/secret.txt",
            "/index%00.html",
        ],
    )
    def test_traversal_is_forbidden(self, docroot, resource) -> None:
        """Any escape from the host directory is rejected."""
        with pytest.raises(PathTraversal):
            resolve_path(str(docroot), HOST, resource)

    def test_cannot_reach_other_host(self, docroot) -> None:
        """One virtual host cannot walk into another host's tree."""
        (docroot / "other.org").mkdir()
        with pytest.raises(PathTraversal):
            resolve_path(str(docroot), HOST, "/../other.org/index.html")

    def test_escape_rejected_even_when_target_exists(self, docroot) -> None:
        """The decision does not depend on the file system."""
        assert (docroot.parent / "secret.txt").exists()
        with pytest.raises(PathTraversal):
            resolve_path(str(docroot), HOST, "/../../secret.txt")

    def test_query_string_is_ignored(self, docroot) -> None:
        """The query string is not part of the path."""
        resolved = resolve_path(str(docroot), HOST, "/index.html?next=../../etc")
        assert resolved.path.endswith(os.path.join(HOST, "index.html"))

    def test_percent_decoding(self, docroot) -> None:
        """Escaped characters are decoded before the walk."""
        resolved = resolve_path(str(docroot), HOST, "/my%20page.html")
        assert resolved.path.endswith("my page.html")

    def test_without_virtual_hosting(self, docroot) -> None:
        """The host segment is omitted and the host is not needed."""
        resolved = resolve_path(str(docroot), None, "/example.com/index.html", virtual_hosting=False)
        assert resolved.root == os.path.realpath(docroot)
        assert resolved.path == os.path.join(os.path.realpath(docroot), HOST, "index.html")

    def test_missing_base_directory(self, tmp_path) -> None:
        """An unusable document root is reported as forbidden."""
        with pytest.raises(PathTraversal):
            resolve_path(str(tmp_path / "missing"), HOST, "/index.html")

    def test_unusable_host_segment(self, docroot) -> None:
        """A host that is not a single segment cannot be used."""
        with pytest.raises(PathTraversal):
            resolve_path(str(docroot), "..", "/secret.txt")

    def test_target_path(self) -> None:
        """Query and fragment are dropped."""
        assert target_path("/a/b?x=1#frag") == "/a/b"
        assert target_path("/a#frag") == "/a"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
class TestConfineRealPath:
    """Symlinks inside the tree must not lead outside of it."""

    def test_symlink_escape(self, docroot) -> None:
        """A link to a file outside the root is rejected."""
        link = docroot / HOST / "leak.txt"
        os.symlink(docroot.parent / "secret.txt", link)
        resolved = resolve_path(str(docroot), HOST, "/leak.txt")
        with pytest.raises(PathTraversal):
            confine_real_path(resolved)

    def test_symlink_inside_root(self, docroot) -> None:
        """A link that stays inside the root is allowed."""
        link = docroot / HOST / "home.html"
        os.symlink(docroot / HOST / "index.html", link)
        resolved = resolve_path(str(docroot), HOST, "/home.html")
        assert confine_real_path(resolved) == os.path.realpath(docroot / HOST / "index.html")
