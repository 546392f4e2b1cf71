"""Extract package identifiers from raw import paths."""

from collections.abc import Iterable

from bpm.core.logger.logger import get_logger
from bpm.discovery.identity import truncate_identifier

logger = get_logger(__name__)


class PackagePathMatcher:
    """Match host-qualified import paths and collapse them to package identifiers.

    Import paths with fewer than three segments, or without a dotted host
    (``fmt``, ``net/http``), are standard-library or same-repository imports
    and are never treated as external dependencies.
    """

    def match(self, imports: Iterable[str], self_identifier: str | None = None) -> list[str]:
        """Collect external package identifiers.

        Args:
            imports: Raw import paths.
            self_identifier: Identifier of the package being scanned, excluded
                from the result.

        Returns:
            Sorted, deduplicated package identifiers.
        """
        packages: set[str] = set()

        for import_path in imports:
            identifier = truncate_identifier(import_path)
            if identifier is None or identifier == self_identifier:
                continue
            if identifier not in packages:
                logger.debug(f"Found package: {identifier}")
                packages.add(identifier)

        return sorted(packages)
