"""File storage for observer results.

Only the results are stored, as a plain mapping of identifier to result
values. Observers loaded back from storage have no callables attached.
Values must be representable in the chosen format (plain numbers, strings,
lists, mappings).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from upath import UPath

from observers.exceptions import StorageError
from observers.log import get_logger
from observers.observer import Observer


if TYPE_CHECKING:
    import os

    from observers.config import FileStorageConfig, FormatType, SupportedFormats


logger = get_logger(__name__)

SUFFIX_FORMATS: dict[str, SupportedFormats] = {
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
}


def resolve_format(
    path: UPath,
    format: FormatType = "auto",  # noqa: A002
) -> SupportedFormats:
    """Resolve the storage format, picking it from the suffix for 'auto'."""
    if format != "auto":
        return format
    try:
        return SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError:
        msg = f"Cannot detect storage format from suffix {path.suffix!r} of {path}"
        raise StorageError(msg) from None


def dump_results(
    observer: Observer,
    format: SupportedFormats = "yaml",  # noqa: A002
) -> str:
    """Serialize the results of an observer."""
    import yamling

    data = observer.to_dict()
    # key order is column order
    kwargs = {"sort_keys": False} if format == "yaml" else {}
    try:
        return yamling.dump(data, mode=format, **kwargs)
    except (yamling.DumpingError, TypeError, ValueError) as e:
        msg = f"Results cannot be serialized as {format}: {e}"
        raise StorageError(msg) from e


def load_results(text: str, format: SupportedFormats = "yaml") -> Observer:  # noqa: A002
    """Restore an observer from serialized results."""
    import yamling

    try:
        data = yamling.load(text, mode=format)
    except (yamling.ParsingError, ValueError) as e:
        msg = f"Failed to parse stored results: {e}"
        raise StorageError(msg) from e
    if data is None:
        data = {}
    if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
        msg = "Stored results must map identifiers to lists of values"
        raise StorageError(msg)
    return Observer.from_results(data)


def save(
    observer: Observer,
    path: str | os.PathLike[str],
    *,
    format: FormatType = "auto",  # noqa: A002
    encoding: str = "utf-8",
) -> UPath:
    """Write the results of an observer to a file.

    Args:
        observer: Observer whose results get stored
        path: Target path or fsspec URL
        format: Storage format, 'auto' picks it from the suffix
        encoding: File encoding

    Returns:
        The path written to
    """
    target = UPath(path)
    text = dump_results(observer, resolve_format(target, format))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding=encoding)
    logger.debug("Saved results of %d observables to %s", len(observer), target)
    return target


def load(
    path: str | os.PathLike[str],
    *,
    format: FormatType = "auto",  # noqa: A002
    encoding: str = "utf-8",
) -> Observer:
    """Load stored results into a detached observer.

    Raises:
        StorageError: If the file does not exist or holds no valid results
    """
    source = UPath(path)
    if not source.exists():
        msg = f"Results file not found: {source}"
        raise StorageError(msg)
    text = source.read_text(encoding=encoding)
    observer = load_results(text, resolve_format(source, format))
    logger.debug("Loaded results of %d observables from %s", len(observer), source)
    return observer


class ResultStore:
    """Stores observer results at a configured location."""

    def __init__(self, config: FileStorageConfig):
        """Initialize store.

        Args:
            config: Storage location, format and encoding
        """
        self.config = config
        self.path = UPath(config.path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self.path)!r})"

    def save(self, observer: Observer) -> UPath:
        """Write the results of `observer`, replacing earlier content."""
        cfg = self.config
        return save(observer, self.path, format=cfg.format, encoding=cfg.encoding)

    def load(self) -> Observer:
        """Load the stored results."""
        cfg = self.config
        return load(self.path, format=cfg.format, encoding=cfg.encoding)

    def exists(self) -> bool:
        """Whether results were stored already."""
        return self.path.exists()
