"""Tests for PackagePathMatcher."""

from bpm.discovery.matcher import PackagePathMatcher


class TestPackagePathMatcher:
    """Tests for PackagePathMatcher class."""

    def test_collapses_and_sorts(self) -> None:
        """Test that sub-packages collapse to one sorted identifier each."""
        matcher = PackagePathMatcher()
        result = matcher.match(
            [
                "github.com/zeta/lib/sub",
                "github.com/alpha/lib",
                "github.com/zeta/lib",
                "github.com/zeta/lib/other/deep",
            ]
        )
        assert result == ["github.com/alpha/lib", "github.com/zeta/lib"]

    def test_skips_standard_library(self) -> None:
        """Test that non-qualified imports are ignored."""
        matcher = PackagePathMatcher()
        assert matcher.match(["fmt", "net/http", "encoding/json"]) == []

    def test_excludes_self(self) -> None:
        """Test that imports of the scanned package itself are excluded."""
        matcher = PackagePathMatcher()
        result = matcher.match(
            ["example.com/acme/app/internal/util", "example.com/acme/lib"],
            self_identifier="example.com/acme/app",
        )
        assert result == ["example.com/acme/lib"]

    def test_accepts_generator(self) -> None:
        """Test that any iterable of paths is accepted."""
        matcher = PackagePathMatcher()
        paths = (p for p in ["github.com/org/repo/a", "github.com/org/repo/b"])
        assert matcher.match(paths) == ["github.com/org/repo"]

    def test_pattern_boundary(self) -> None:
        """Test that only host-qualified paths with three segments survive."""
        matcher = PackagePathMatcher()
        result = matcher.match(["example.com/org/repo/sub/pkg", "fmt", "example.com/org/repo"])
        assert result == ["example.com/org/repo"]
