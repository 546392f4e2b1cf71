"""Tests for ConcurrentFetcher."""

from pathlib import Path

from bpm.engine.fetcher import ConcurrentFetcher
from bpm.engine.git_operations import GitOperations


def _fetcher(overrides: dict[str, str]) -> ConcurrentFetcher:
    return ConcurrentFetcher(
        git_operations=GitOperations(retry_attempts=1, retry_delay=1),
        max_workers=4,
        url_overrides=overrides,
    )


class TestConcurrentFetcher:
    """Tests for ConcurrentFetcher class."""

    def test_fetch_records_state(self, registry, temp_dir: Path) -> None:
        """Test that fetched entries carry URL, branch and commit."""
        registry.add("example.com/acme/a")
        registry.add("example.com/acme/b")
        vendor = temp_dir / "app" / "vendor"

        batch = _fetcher(registry.overrides).fetch(
            ["example.com/acme/a", "example.com/acme/b"], vendor
        )

        assert batch.failures == {}
        assert set(batch.entries) == {"example.com/acme/a", "example.com/acme/b"}
        entry = batch.entries["example.com/acme/a"]
        assert entry.url == registry.overrides["example.com/acme/a"]
        assert entry.branch == registry.branch("example.com/acme/a")
        assert entry.commit == registry.head("example.com/acme/a")
        assert (vendor / "example.com" / "acme" / "a" / "lib.go").is_file()

    def test_partial_failure_is_isolated(self, registry, temp_dir: Path) -> None:
        """Test that one failing clone leaves its siblings intact."""
        registry.add("example.com/acme/good")
        registry.add("example.com/acme/other")
        overrides = dict(registry.overrides)
        overrides["example.com/acme/bad"] = str(temp_dir / "missing-remote")
        vendor = temp_dir / "vendor"

        batch = _fetcher(overrides).fetch(
            ["example.com/acme/bad", "example.com/acme/good", "example.com/acme/other"], vendor
        )

        assert sorted(batch.entries) == ["example.com/acme/good", "example.com/acme/other"]
        assert list(batch.failures) == ["example.com/acme/bad"]
        assert not (vendor / "example.com" / "acme" / "bad").exists()

    def test_existing_checkout_is_reused(self, registry, temp_dir: Path) -> None:
        """Test that an already vendored package is not cloned again."""
        registry.add("example.com/acme/a")
        vendor = temp_dir / "vendor"
        fetcher = _fetcher(registry.overrides)

        fetcher.fetch(["example.com/acme/a"], vendor)
        newer = registry.commit("example.com/acme/a")
        batch = fetcher.fetch(["example.com/acme/a"], vendor)

        # The vendored checkout still sits on the commit it was cloned at
        assert batch.entries["example.com/acme/a"].commit != newer

    def test_empty_batch(self, temp_dir: Path) -> None:
        """Test that nothing is created for an empty level."""
        vendor = temp_dir / "vendor"

        batch = _fetcher({}).fetch([], vendor)

        assert batch.entries == {}
        assert not vendor.exists()

    def test_url_for(self) -> None:
        """Test URL construction with and without overrides."""
        fetcher = _fetcher({"example.com/acme/a": "/local/a"})
        assert fetcher.url_for("example.com/acme/a") == "/local/a"
        assert fetcher.url_for("example.com/acme/b") == "https://example.com/acme/b"
