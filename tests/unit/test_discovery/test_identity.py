"""Tests for package identifier helpers."""

from pathlib import Path

import pytest

from bpm.discovery.identity import (
    identifier_from_url,
    package_url,
    truncate_identifier,
    vendor_path,
)


class TestTruncateIdentifier:
    """Tests for truncate_identifier."""

    @pytest.mark.parametrize(
        "import_path,expected",
        [
            ("github.com/org/repo", "github.com/org/repo"),
            ("github.com/org/repo/sub/pkg", "github.com/org/repo"),
            ("gopkg.in/yaml/v3", "gopkg.in/yaml/v3"),
            ("example.com/acme/app/internal/util", "example.com/acme/app"),
        ],
    )
    def test_host_qualified_paths(self, import_path: str, expected: str) -> None:
        """Test that host-qualified paths are cut to three segments."""
        assert truncate_identifier(import_path) == expected

    @pytest.mark.parametrize(
        "import_path",
        [
            "fmt",
            "net/http",
            "golang.org/x",
            "localpkg/org/repo",
            "example.toolongtld/org/repo",
            "",
        ],
    )
    def test_rejected_paths(self, import_path: str) -> None:
        """Test that standard library and unqualified paths are rejected."""
        assert truncate_identifier(import_path) is None


class TestIdentifierFromUrl:
    """Tests for identifier_from_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/org/repo",
            "https://github.com/org/repo.git",
            "https://GitHub.com/org/repo.git/",
            "ssh://git@github.com:22/org/repo.git",
            "git@github.com:org/repo.git",
            "github.com:org/repo",
        ],
    )
    def test_remote_formats(self, url: str) -> None:
        """Test the supported remote URL syntaxes."""
        assert identifier_from_url(url) == "github.com/org/repo"

    def test_nested_path_is_truncated(self) -> None:
        """Test that extra path segments are dropped."""
        assert identifier_from_url("https://gitlab.com/group/sub/repo.git") == "gitlab.com/group/sub"

    def test_local_path_has_no_identity(self) -> None:
        """Test that a local path is not a package identity."""
        assert identifier_from_url("/srv/git/repo") is None

    def test_host_without_dot(self) -> None:
        """Test that a host without a domain is rejected."""
        assert identifier_from_url("https://localhost/org/repo.git") is None


class TestPackageUrl:
    """Tests for package_url."""

    def test_default_scheme(self) -> None:
        """Test that the identifier is prefixed with https."""
        assert package_url("github.com/org/repo") == "https://github.com/org/repo"

    def test_custom_scheme(self) -> None:
        """Test a custom scheme."""
        assert package_url("github.com/org/repo", scheme="ssh://") == "ssh://github.com/org/repo"

    def test_override_wins(self) -> None:
        """Test that an explicit override is used verbatim."""
        overrides = {"github.com/org/repo": "/mirror/repo"}
        assert package_url("github.com/org/repo", overrides) == "/mirror/repo"
        assert package_url("github.com/org/other", overrides) == "https://github.com/org/other"


def test_vendor_path() -> None:
    """Test the checkout location of a package."""
    vendor = Path("/project/vendor")
    assert vendor_path(vendor, "github.com/org/repo") == Path("/project/vendor/github.com/org/repo")
