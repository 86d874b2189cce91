from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Protocol

from .access_control import posix_access_control
from .models import AccessControl, Owner, Permissions

UNKNOWN_OWNER = "unknown"


class PlatformMetadataProvider(Protocol):
    def owner(self, path: Path, st: os.stat_result) -> Owner: ...

    def permissions(self, path: Path, st: os.stat_result) -> Permissions: ...

    def is_hidden(self, path: Path) -> bool: ...

    def is_system_protected(self, path: Path) -> bool: ...

    def access_control(self, path: Path) -> AccessControl: ...


def _is_dotfile(path: Path) -> bool:
    return path.name.startswith(".")


class PosixMetadataProvider:
    def __init__(self) -> None:
        self._users: dict[int, str] = {}
        self._groups: dict[int, str] = {}

    def _user_name(self, uid: int) -> str:
        if uid not in self._users:
            import pwd

            try:
                self._users[uid] = pwd.getpwuid(uid).pw_name
            except KeyError:
                self._users[uid] = str(uid)
        return self._users[uid]

    def _group_name(self, gid: int) -> str:
        if gid not in self._groups:
            import grp

            try:
                self._groups[gid] = grp.getgrgid(gid).gr_name
            except KeyError:
                self._groups[gid] = str(gid)
        return self._groups[gid]

    def owner(self, path: Path, st: os.stat_result) -> Owner:
        return Owner(user=self._user_name(st.st_uid), group=self._group_name(st.st_gid))

    def permissions(self, path: Path, st: os.stat_result) -> Permissions:
        return Permissions.from_mode(st.st_mode)

    def is_hidden(self, path: Path) -> bool:
        return _is_dotfile(path)

    def is_system_protected(self, path: Path) -> bool:
        return False

    def access_control(self, path: Path) -> AccessControl:
        return posix_access_control(path)


class WindowsMetadataProvider:
    """Reads the native hidden/system attributes exposed by `os.stat` on Windows.

    `os.stat` reports `st_uid` and `st_gid` as 0 on Windows, so owners are
    shown as unknown rather than as fake numeric ids.
    """

    def _attributes(self, path: Path) -> int:
        try:
            st = path.lstat()
        except OSError:
            return 0
        return getattr(st, "st_file_attributes", 0)

    def owner(self, path: Path, st: os.stat_result) -> Owner:
        return Owner(user=UNKNOWN_OWNER, group=UNKNOWN_OWNER)

    def permissions(self, path: Path, st: os.stat_result) -> Permissions:
        return Permissions.from_mode(st.st_mode)

    def is_hidden(self, path: Path) -> bool:
        if _is_dotfile(path):
            return True
        return bool(self._attributes(path) & stat.FILE_ATTRIBUTE_HIDDEN)

    def is_system_protected(self, path: Path) -> bool:
        return bool(self._attributes(path) & stat.FILE_ATTRIBUTE_SYSTEM)

    def access_control(self, path: Path) -> AccessControl:
        return AccessControl()


def default_provider() -> PlatformMetadataProvider:
    if os.name == "nt":
        return WindowsMetadataProvider()
    return PosixMetadataProvider()
