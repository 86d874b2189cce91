from __future__ import annotations

import logging
import os
from pathlib import Path

from .models import AccessControl

logger = logging.getLogger(__name__)

POSIX_ACL_ACCESS = "system.posix_acl_access"
SELINUX_CONTEXT = "security.selinux"
SMACK_CONTEXT = "security.SMACK64"


def _read_context(path: Path, attribute: str, names: list[str]) -> str:
    if attribute not in names:
        return ""
    try:
        raw = os.getxattr(path, attribute, follow_symlinks=False)
    except OSError as exc:
        logger.debug("Cannot read %s on %s: %s", attribute, path, exc)
        return ""
    return raw.rstrip(b"\x00").decode("utf-8", "replace")


def posix_access_control(path: Path) -> AccessControl:
    """Summarize POSIX ACL and security contexts from extended attributes.

    Platforms without `os.listxattr` and filesystems without xattr support
    produce an empty summary.
    """
    if not hasattr(os, "listxattr"):
        return AccessControl()
    try:
        names = os.listxattr(path, follow_symlinks=False)
    except OSError as exc:
        logger.debug("Cannot list extended attributes of %s: %s", path, exc)
        return AccessControl()
    return AccessControl(
        has_acl=POSIX_ACL_ACCESS in names,
        selinux_context=_read_context(path, SELINUX_CONTEXT, names),
        smack_context=_read_context(path, SMACK_CONTEXT, names),
    )
