from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from .diagnostics import ErrorReporter
from .models import MetadataRecord, NodeType

logger = logging.getLogger(__name__)


def total_file_size(path: Path, reporter: ErrorReporter | None = None) -> int:
    """Sum apparent sizes below `path` straight from disk, without following links.

    Errors are reported and the failing entry contributes nothing.
    """
    reporter = reporter or ErrorReporter()
    try:
        st = path.lstat()
    except OSError as exc:
        reporter.report(path, exc)
        return 0

    if stat.S_ISREG(st.st_mode):
        return st.st_size
    if not stat.S_ISDIR(st.st_mode):
        return 0

    size = st.st_size
    try:
        scanner = os.scandir(path)
    except OSError as exc:
        reporter.report(path, exc)
        return size
    with scanner:
        try:
            for entry in scanner:
                size += total_file_size(Path(entry.path), reporter)
        except OSError as exc:
            reporter.report(path, exc)
    return size


def finalize_sizes(record: MetadataRecord, reporter: ErrorReporter | None = None) -> None:
    """Replace every directory's size by its cumulative size, post-order.

    Expanded directories add up their finalized children; directories left
    unexpanded (usually by the depth limit) are re-walked on disk.
    """
    if record.attributes is None:
        return
    if record.file_type.node_type != NodeType.DIR:
        return

    if record.content is not None:
        total = record.attributes.size
        for child in record.content:
            if child.is_dot_entry:
                continue
            finalize_sizes(child, reporter)
            total += child.size or 0
    else:
        logger.debug("Re-walking unexpanded directory %s for its size", record.path)
        total = total_file_size(record.path, reporter)
    record.attributes = record.attributes.with_size(total)
