"""Reading and rewriting documents safely.

Documents are only read from regular files below the working directory, never
through symlinks, and within a size limit. In-place updates go through a
temporary file that replaces the original only if it did not change while the
headings were processed.
"""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, SUPPORTED_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "HEADING_SLUG_MAX_FILE_SIZE"

Fingerprint = tuple[object, object, int, int]


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Read the document size limit from ``HEADING_SLUG_MAX_FILE_SIZE``.

    Args:
        default: Limit in bytes used when the variable is not set.

    Returns:
        int: Maximum document size in bytes.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.

    Examples:
        os.environ["HEADING_SLUG_MAX_FILE_SIZE"] = "204800"
        get_max_file_size()  # 204800
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_value is None:
        return default

    try:
        limit = int(raw_value)
    except ValueError as error:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw_value!r}"
        ) from error

    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {limit}")

    return limit


def contains_symlink(path: Path) -> bool:
    """Tell whether `path` or one of its parents is a symlink."""
    for part in (path, *path.parents):
        try:
            if part.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve a document path and check that it may be processed.

    Args:
        raw_path: Path given on the command line.
        base_dir: Directory the document must live under.

    Returns:
        Path: Absolute, resolved path of the document.

    Raises:
        ValueError: If the path goes through a symlink, does not exist, is not
            a regular file, lies outside `base_dir`, or has an extension other
            than those of HTML and hast JSON documents.

    Examples:
        normalize_filepath("site/index.html", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Cannot resolve {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")

    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")

    if resolved.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not an HTML or hast JSON file.\n"
            f"Supported extensions are: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat a document without following symlinks.

    Raises:
        IOError: If the document cannot be accessed, or is not a regular file.
    """
    try:
        result = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Cannot access {filepath}: {error}") from error

    if stat.S_ISLNK(result.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(result.st_mode):
        raise IOError(f"{filepath} is not a regular file.")

    return result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Refuse documents larger than `max_size` bytes.

    Raises:
        IOError: If the document is too large.
    """
    if stat_result.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")


def _fingerprint(stat_result: os.stat_result) -> Fingerprint:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Compare two snapshots of a document.

    Raises:
        IOError: If the inode, device, size, or modification time differ.
    """
    if _fingerprint(expected_stat) != _fingerprint(current_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def read_document(filepath: Path) -> str:
    """Read a document as UTF-8.

    Raises:
        IOError: If the document cannot be opened or is not valid UTF-8.
    """
    try:
        return filepath.read_text(encoding="UTF-8")
    except (OSError, UnicodeDecodeError) as error:
        raise IOError(f"Error reading {filepath}: {error}") from error


def write_document(
    filepath: Path,
    content: str,
    expected_stat: os.stat_result,
    initial_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Replace a document atomically.

    The new content goes to a temporary file next to the document, which takes
    over the document's permissions (and owner, when allowed) before it
    replaces it. The access time from before the document was read is put
    back; the modification time shows the update.

    Args:
        filepath: Document to replace.
        content: New document text.
        expected_stat: Snapshot taken after reading; the document must still
            match it.
        initial_stat: Snapshot taken before reading, for the access time.
        warn: Called with a message when ownership cannot be kept.

    Raises:
        IOError: If the document changed since `expected_stat` or cannot be
            replaced.

    Examples:
        write_document(Path("index.html"), html_text, post_stat, pre_stat)
    """
    ensure_file_unchanged(expected_stat, collect_file_stat(filepath), filepath)

    temp_path = _write_temp_file(filepath.parent, content)
    try:
        os.chmod(temp_path, stat.S_IMODE(expected_stat.st_mode))
        _copy_ownership(expected_stat, temp_path, filepath, warn)
        os.replace(temp_path, filepath)
        os.utime(filepath, ns=(initial_stat.st_atime_ns, filepath.stat().st_mtime_ns))
    finally:
        temp_path.unlink(missing_ok=True)


def _write_temp_file(directory: Path, content: str) -> Path:
    with tempfile.NamedTemporaryFile(
        mode="w", encoding="UTF-8", dir=directory, delete=False
    ) as handle:
        temp_path = Path(handle.name)
        try:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
    return temp_path


def _copy_ownership(
    source_stat: os.stat_result,
    target: Path,
    filepath: Path,
    warn: Callable[[str], None] | None,
) -> None:
    uid = getattr(source_stat, "st_uid", None)
    gid = getattr(source_stat, "st_gid", None)
    # chown needs privileges and is missing on some platforms
    if uid is None or gid is None or not hasattr(os, "chown"):
        return

    try:
        os.chown(target, uid, gid)
    except PermissionError:
        if warn is not None:
            warn(
                f"Warning: Could not preserve file ownership for {filepath.name} "
                "(requires elevated privileges)"
            )
