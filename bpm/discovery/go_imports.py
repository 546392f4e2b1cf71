"""Go import extraction using Tree-sitter."""

from pathlib import Path
from typing import Any

import tree_sitter_go as tsgo
from tree_sitter import Language, Parser

from bpm.core.exceptions.errors import ImportParseError, ScanError
from bpm.core.logger.logger import get_logger

logger = get_logger(__name__)

# Top-level nodes that may precede the first declaration of a Go file
_HEADER_NODE_TYPES = {"package_clause", "import_declaration", "comment"}


def _starts_import(node: Any) -> bool:
    """Whether an error node is a malformed import declaration."""
    return node.child_count > 0 and node.children[0].type == "import"


class GoImportExtractor:
    """Extracts import paths from Go source files.

    Only the package clause and the import declarations are inspected, so
    syntax errors further down a file do not affect dependency discovery.
    """

    extensions = [".go"]

    def __init__(self) -> None:
        self._parser: Parser | None = None
        self._language: Language | None = None

    def _init_parser(self) -> None:
        """Initialize the Tree-sitter Go parser."""
        self._language = Language(tsgo.language())
        self._parser = Parser(self._language)

    def extract(self, content: str, file_path: Path | None = None) -> list[str]:
        """Extract import paths from Go source code.

        Args:
            content: Source code content.
            file_path: Path used in error messages.

        Returns:
            Import paths in declaration order.

        Raises:
            ImportParseError: If the package clause or imports cannot be parsed.
        """
        if self._parser is None:
            self._init_parser()

        source = content.encode("utf-8")
        root = self._parser.parse(source).root_node
        location = str(file_path) if file_path else "<source>"

        imports: list[str] = []
        has_package = False

        for child in root.named_children:
            if child.type == "ERROR":
                if not has_package or _starts_import(child):
                    self._raise_parse_error(child, location)
                # Code after the imports is not inspected
                break
            if child.type not in _HEADER_NODE_TYPES:
                # First declaration ends the header
                if not has_package:
                    self._raise_parse_error(child, location)
                break
            if child.has_error:
                self._raise_parse_error(child, location)
            if child.type == "package_clause":
                has_package = True
            elif child.type == "import_declaration":
                imports.extend(self._extract_import_declaration(child, source, location))

        if not has_package:
            raise ImportParseError(
                f"Missing package clause in {location}",
                path=location,
            )

        return imports

    def extract_file(self, file_path: Path) -> list[str]:
        """Read a Go file and extract its import paths.

        Args:
            file_path: Path to the source file.

        Returns:
            Import paths declared in the file.

        Raises:
            ScanError: If the file cannot be read.
            ImportParseError: If the file cannot be parsed.
        """
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScanError(
                f"Cannot read source file: {file_path}",
                path=str(file_path),
                details={"error": str(e)},
            ) from e

        return self.extract(content, file_path)

    def extract_all(self, files: list[Path]) -> dict[Path, list[str]]:
        """Extract imports from several files.

        Args:
            files: Source files to parse.

        Returns:
            Mapping from file path to its import paths.
        """
        results: dict[Path, list[str]] = {}
        for file_path in files:
            results[file_path] = self.extract_file(file_path)
            logger.debug(f"{file_path}: {len(results[file_path])} imports")
        return results

    def _extract_import_declaration(
        self, node: Any, source: bytes, location: str
    ) -> list[str]:
        imports: list[str] = []

        for child in node.children:
            if child.type == "import_spec":
                # import "fmt"
                imports.append(self._extract_import_spec(child, source, location))
            elif child.type == "import_spec_list":
                # import ( "fmt"; "os" )
                for spec in child.children:
                    if spec.type == "import_spec":
                        imports.append(self._extract_import_spec(spec, source, location))

        return imports

    def _extract_import_spec(self, node: Any, source: bytes, location: str) -> str:
        path_node = node.child_by_field_name("path")
        if path_node is None:
            self._raise_parse_error(node, location)
        # Strip the surrounding quotes or backticks
        return self._get_node_text(source, path_node)[1:-1]

    @staticmethod
    def _get_node_text(source: bytes, node: Any) -> str:
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def _raise_parse_error(node: Any, location: str) -> None:
        line = node.start_point[0] + 1
        raise ImportParseError(
            f"Failed to parse imports of {location} at line {line}",
            path=location,
            details={"line": line},
        )
