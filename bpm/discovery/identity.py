"""Package identifier helpers."""

import re
from pathlib import Path

# host.tld/org/repo at the start of an import path
PACKAGE_PATTERN = re.compile(r"^[^/]+\.[^.]{1,6}/[^/]+/[^/]+")

# scp-like remotes: git@github.com:org/repo.git
_SCP_REMOTE_PATTERN = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")
# URL remotes: https://host/org/repo.git, ssh://git@host:22/org/repo
_URL_REMOTE_PATTERN = re.compile(
    r"^[a-zA-Z][a-zA-Z0-9+.-]*://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$"
)


def truncate_identifier(import_path: str) -> str | None:
    """Reduce an import path to its package identifier.

    Args:
        import_path: Raw import path, e.g. ``github.com/org/repo/sub/pkg``.

    Returns:
        ``host/org/repo`` if the path is host-qualified, None otherwise.
    """
    if not PACKAGE_PATTERN.match(import_path):
        return None
    return "/".join(import_path.split("/")[:3])


def identifier_from_url(url: str) -> str | None:
    """Derive a package identifier from a git remote URL.

    Args:
        url: Remote URL (https, ssh or scp-like syntax).

    Returns:
        Package identifier, or None if the URL is not host-qualified.
    """
    url = url.strip()
    match = _URL_REMOTE_PATTERN.match(url) or _SCP_REMOTE_PATTERN.match(url)
    if not match:
        return None

    path = match.group("path").strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]

    return truncate_identifier(f"{match.group('host').lower()}/{path}")


def package_url(
    identifier: str,
    overrides: dict[str, str] | None = None,
    scheme: str = "https://",
) -> str:
    """Build the fetch URL for a package identifier.

    Args:
        identifier: Package identifier.
        overrides: Explicit fetch URL per identifier.
        scheme: Scheme prepended when no override exists.

    Returns:
        Fetch URL.
    """
    if overrides and identifier in overrides:
        return overrides[identifier]
    return f"{scheme}{identifier}"


def vendor_path(vendor_dir: Path, identifier: str) -> Path:
    """Checkout directory of a package inside a vendor directory."""
    return vendor_dir.joinpath(*identifier.split("/"))
