"""Tests for Reconciler."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bpm.core.exceptions.errors import GitError
from bpm.engine.git_operations import GitOperations
from bpm.engine.reconciler import Reconciler
from bpm.models.lockfile import DependencyEntry

LIB_A = "example.com/acme/a"
LIB_B = "example.com/acme/b"


def _reconciler(overrides: dict[str, str], git_ops=None) -> Reconciler:
    return Reconciler(
        git_operations=git_ops or GitOperations(retry_attempts=1, retry_delay=1),
        max_workers=4,
        vendor_dir_name="vendor",
        url_overrides=overrides,
    )


def _checkout(vendor: Path, identifier: str) -> Path:
    return vendor.joinpath(*identifier.split("/"))


class TestReconciler:
    """Tests for Reconciler class."""

    def test_pins_recorded_commit(self, registry, temp_dir: Path) -> None:
        """Test that a missing checkout is cloned and pinned to an older commit."""
        registry.add(LIB_A)
        pinned = registry.head(LIB_A)
        registry.commit(LIB_A)
        entries = {
            LIB_A: DependencyEntry(
                url=registry.overrides[LIB_A],
                branch=registry.branch(LIB_A),
                commit=pinned,
            )
        }
        vendor = temp_dir / "vendor"
        git_ops = GitOperations()

        report = _reconciler(registry.overrides).reconcile(entries, vendor)

        assert report.clones == 1
        assert report.pinned == [LIB_A]
        assert git_ops.current_commit_hash(_checkout(vendor, LIB_A)) == pinned
        assert git_ops.current_branch(_checkout(vendor, LIB_A)) == registry.branch(LIB_A)

    def test_nested_entries(self, registry, temp_dir: Path) -> None:
        """Test that nested entries land in the parent's vendor directory."""
        registry.add(LIB_A)
        registry.add(LIB_B)
        entries = {
            LIB_A: DependencyEntry(
                commit=registry.head(LIB_A),
                dependencies={LIB_B: DependencyEntry(commit=registry.head(LIB_B))},
            )
        }
        vendor = temp_dir / "vendor"

        report = _reconciler(registry.overrides).reconcile(entries, vendor)

        assert sorted(report.pinned) == [LIB_A, LIB_B]
        nested = _checkout(_checkout(vendor, LIB_A) / "vendor", LIB_B)
        assert GitOperations().current_commit_hash(nested) == registry.head(LIB_B)

    def test_backfills_missing_fields(self, registry, temp_dir: Path) -> None:
        """Test that empty url, branch and commit are filled from the checkout."""
        registry.add(LIB_A)
        entry = DependencyEntry()

        _reconciler(registry.overrides).reconcile({LIB_A: entry}, temp_dir / "vendor")

        assert entry.url == registry.overrides[LIB_A]
        assert entry.branch == registry.branch(LIB_A)
        assert entry.commit == registry.head(LIB_A)

    def test_second_run_is_idempotent(self, registry, temp_dir: Path) -> None:
        """Test that reconciling a matching tree performs no git writes."""
        registry.add(LIB_A)
        registry.add(LIB_B)
        entries = {
            LIB_A: DependencyEntry(
                branch=registry.branch(LIB_A),
                commit=registry.head(LIB_A),
                dependencies={LIB_B: DependencyEntry(commit=registry.head(LIB_B))},
            )
        }
        vendor = temp_dir / "vendor"
        _reconciler(registry.overrides).reconcile(entries, vendor)

        git_ops = MagicMock(wraps=GitOperations(retry_attempts=1, retry_delay=1))
        report = _reconciler(registry.overrides, git_ops).reconcile(entries, vendor)

        assert report.clones == 0
        assert report.checkouts == 0
        git_ops.clone.assert_not_called()
        git_ops.checkout_branch.assert_not_called()
        git_ops.checkout_commit.assert_not_called()

    def test_skips_back_references(self, registry, temp_dir: Path) -> None:
        """Test that entries on the current path are not cloned again."""
        registry.add(LIB_A)
        entries = {
            LIB_A: DependencyEntry(
                commit=registry.head(LIB_A),
                dependencies={
                    LIB_A: DependencyEntry(commit=registry.head(LIB_A)),
                    "example.com/acme/app": DependencyEntry(commit="abc"),
                },
            )
        }
        vendor = temp_dir / "vendor"

        report = _reconciler(registry.overrides).reconcile(
            entries, vendor, root_identifier="example.com/acme/app"
        )

        assert report.pinned == [LIB_A]
        assert not (_checkout(vendor, LIB_A) / "vendor").exists()

    def test_failure_aborts_before_next_level(self, registry, temp_dir: Path) -> None:
        """Test that one failing entry aborts the run before nested levels."""
        registry.add(LIB_A)
        registry.add(LIB_B)
        overrides = dict(registry.overrides)
        entries = {
            LIB_A: DependencyEntry(
                commit=registry.head(LIB_A),
                dependencies={LIB_B: DependencyEntry(commit=registry.head(LIB_B))},
            ),
            "example.com/acme/broken": DependencyEntry(url=str(temp_dir / "missing-remote")),
        }
        vendor = temp_dir / "vendor"

        with pytest.raises(GitError):
            _reconciler(overrides).reconcile(entries, vendor)

        assert not (_checkout(vendor, LIB_A) / "vendor").exists()

    def test_unknown_commit_aborts(self, registry, temp_dir: Path) -> None:
        """Test that a commit missing upstream raises GitError."""
        registry.add(LIB_A)
        entries = {LIB_A: DependencyEntry(commit="1234abcd" * 5)}

        with pytest.raises(GitError, match="Commit not found"):
            _reconciler(registry.overrides).reconcile(entries, temp_dir / "vendor")
