"""Source file discovery."""

from pathlib import Path

from bpm.core.config.settings import get_settings
from bpm.core.exceptions.errors import ScanError
from bpm.core.logger.logger import get_logger

logger = get_logger(__name__)


class SourceScanner:
    """Walks a project tree and collects source files, skipping vendored code."""

    def __init__(
        self,
        vendor_dir_name: str | None = None,
        extensions: list[str] | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            vendor_dir_name: Directory name skipped at any depth.
            extensions: File extensions to collect.
        """
        settings = get_settings()

        self.vendor_dir_name = vendor_dir_name or settings.project.vendor_dir_name
        self.extensions = {
            ext.lower() for ext in (extensions or settings.project.source_extensions)
        }

    def scan(self, root: Path) -> list[Path]:
        """Return every source file under root.

        Args:
            root: Directory to scan.

        Returns:
            Sorted list of source file paths.

        Raises:
            ScanError: If a directory cannot be listed.
        """
        files = self._scan_dir(root)
        logger.info(f"Found files: {len(files)} in {root}")
        return files

    def _scan_dir(self, directory: Path) -> list[Path]:
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            raise ScanError(
                f"Cannot list directory: {directory}",
                path=str(directory),
                details={"error": str(e)},
            ) from e

        result: list[Path] = []
        for child in children:
            if child.is_dir():
                if child.is_symlink():
                    logger.debug(f"Skipping linked folder: {child}")
                    continue
                if child.name == self.vendor_dir_name:
                    logger.debug(f"Skipping vendor folder: {child}")
                    continue
                result.extend(self._scan_dir(child))
            elif child.suffix.lower() in self.extensions:
                logger.debug(f"File: {child}")
                result.append(child)

        return result
