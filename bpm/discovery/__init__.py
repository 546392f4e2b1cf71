"""Dependency discovery: source scanning, import extraction and package matching."""

from bpm.discovery.go_imports import GoImportExtractor
from bpm.discovery.identity import (
    PACKAGE_PATTERN,
    identifier_from_url,
    package_url,
    truncate_identifier,
    vendor_path,
)
from bpm.discovery.matcher import PackagePathMatcher
from bpm.discovery.scanner import SourceScanner

__all__ = [
    "PACKAGE_PATTERN",
    "GoImportExtractor",
    "PackagePathMatcher",
    "SourceScanner",
    "identifier_from_url",
    "package_url",
    "truncate_identifier",
    "vendor_path",
]
