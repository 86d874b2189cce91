from __future__ import annotations

import logging
import os
import stat
from datetime import UTC, datetime
from pathlib import Path

from .diagnostics import ErrorReporter
from .models import Attributes, FileType, MetadataRecord, Name, SymLink
from .platform_meta import PlatformMetadataProvider, default_provider

logger = logging.getLogger(__name__)


def _attributes(
    path: Path,
    st: os.stat_result,
    provider: PlatformMetadataProvider,
) -> Attributes:
    return Attributes(
        inode=st.st_ino,
        links=st.st_nlink,
        size=st.st_size,
        date=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        owner=provider.owner(path, st),
        permissions=provider.permissions(path, st),
        access_control=provider.access_control(path),
    )


def resolve(
    path: Path | str,
    dereference: bool,
    *,
    provider: PlatformMetadataProvider | None = None,
    reporter: ErrorReporter | None = None,
) -> MetadataRecord:
    """Resolve one path into a `MetadataRecord`.

    Only a failing `lstat` of `path` itself raises. With `dereference` a
    symlink is described by its target; a symlink whose target cannot be
    stat-ed is then reported and returned without attributes. Without
    `dereference` the link's own metadata is used and its target only
    decides whether it points at a directory.
    """
    path = Path(path)
    provider = provider or default_provider()

    st = path.lstat()
    target_st: os.stat_result | None = None
    broken = False
    if stat.S_ISLNK(st.st_mode):
        try:
            followed = path.stat()
        except OSError as exc:
            if dereference:
                broken = True
                (reporter or ErrorReporter()).report(path, exc)
        else:
            if dereference:
                st = followed
            else:
                target_st = followed

    permissions = provider.permissions(path, st)
    file_type = FileType.classify(st, permissions, target_st)
    attributes = None if broken else _attributes(path, st, provider)
    if broken:
        logger.debug("Broken symlink %s resolved without attributes", path)

    return MetadataRecord(
        name=Name.from_path(path, file_type),
        path=path,
        file_type=file_type,
        symlink=SymLink.from_path(path),
        attributes=attributes,
    )
