from __future__ import annotations

import os
import stat
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path


class NodeType(str, Enum):
    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    BLOCK_DEVICE = "block_device"
    CHAR_DEVICE = "char_device"
    FIFO = "fifo"
    SOCKET = "socket"
    SPECIAL = "special"


class Severity(IntEnum):
    """Worst problem seen while listing; only ever raised, never lowered."""

    OK = 0
    MINOR_ISSUE = 1
    MAJOR_ISSUE = 2


class Display(str, Enum):
    VISIBLE_ONLY = "visible_only"
    ALMOST_ALL = "almost_all"
    ALL = "all"
    SYSTEM_PROTECTED = "system_protected"
    DIRECTORY_ONLY = "directory_only"


class Layout(str, Enum):
    ONELINE = "oneline"
    TREE = "tree"
    GRID = "grid"


@dataclass(frozen=True)
class Permissions:
    user_read: bool = False
    user_write: bool = False
    user_execute: bool = False
    group_read: bool = False
    group_write: bool = False
    group_execute: bool = False
    other_read: bool = False
    other_write: bool = False
    other_execute: bool = False
    sticky: bool = False
    setgid: bool = False
    setuid: bool = False

    @classmethod
    def from_mode(cls, mode: int) -> Permissions:
        return cls(
            user_read=bool(mode & stat.S_IRUSR),
            user_write=bool(mode & stat.S_IWUSR),
            user_execute=bool(mode & stat.S_IXUSR),
            group_read=bool(mode & stat.S_IRGRP),
            group_write=bool(mode & stat.S_IWGRP),
            group_execute=bool(mode & stat.S_IXGRP),
            other_read=bool(mode & stat.S_IROTH),
            other_write=bool(mode & stat.S_IWOTH),
            other_execute=bool(mode & stat.S_IXOTH),
            sticky=bool(mode & stat.S_ISVTX),
            setgid=bool(mode & stat.S_ISGID),
            setuid=bool(mode & stat.S_ISUID),
        )

    @property
    def is_executable(self) -> bool:
        return self.user_execute or self.group_execute or self.other_execute

    def to_mode(self) -> int:
        bits = (
            (self.user_read, stat.S_IRUSR),
            (self.user_write, stat.S_IWUSR),
            (self.user_execute, stat.S_IXUSR),
            (self.group_read, stat.S_IRGRP),
            (self.group_write, stat.S_IWGRP),
            (self.group_execute, stat.S_IXGRP),
            (self.other_read, stat.S_IROTH),
            (self.other_write, stat.S_IWOTH),
            (self.other_execute, stat.S_IXOTH),
            (self.sticky, stat.S_ISVTX),
            (self.setgid, stat.S_ISGID),
            (self.setuid, stat.S_ISUID),
        )
        mode = 0
        for enabled, bit in bits:
            if enabled:
                mode |= bit
        return mode

    def symbolic(self) -> str:
        """Render as the nine-character `rwxr-xr-x` form, with s/t overlays."""

        def _exec(executable: bool, special: bool, on: str, off: str) -> str:
            if special:
                return on if executable else off
            return "x" if executable else "-"

        return "".join(
            (
                "r" if self.user_read else "-",
                "w" if self.user_write else "-",
                _exec(self.user_execute, self.setuid, "s", "S"),
                "r" if self.group_read else "-",
                "w" if self.group_write else "-",
                _exec(self.group_execute, self.setgid, "s", "S"),
                "r" if self.other_read else "-",
                "w" if self.other_write else "-",
                _exec(self.other_execute, self.sticky, "t", "T"),
            )
        )


@dataclass(frozen=True)
class FileType:
    node_type: NodeType
    executable: bool = False
    uid: bool = False
    is_dir: bool = False

    @classmethod
    def classify(
        cls,
        st: os.stat_result,
        permissions: Permissions,
        target_st: os.stat_result | None = None,
    ) -> FileType:
        """Classify `st`; `target_st` is the followed stat of a symlink, if any."""
        mode = st.st_mode
        if stat.S_ISREG(mode):
            return cls(
                NodeType.FILE,
                executable=permissions.is_executable,
                uid=permissions.setuid,
            )
        if stat.S_ISDIR(mode):
            return cls(NodeType.DIR, uid=permissions.setuid)
        if stat.S_ISLNK(mode):
            is_dir = target_st is not None and stat.S_ISDIR(target_st.st_mode)
            return cls(NodeType.SYMLINK, is_dir=is_dir)
        if stat.S_ISFIFO(mode):
            return cls(NodeType.FIFO)
        if stat.S_ISCHR(mode):
            return cls(NodeType.CHAR_DEVICE)
        if stat.S_ISBLK(mode):
            return cls(NodeType.BLOCK_DEVICE)
        if stat.S_ISSOCK(mode):
            return cls(NodeType.SOCKET)
        return cls(NodeType.SPECIAL)

    @property
    def is_symlink(self) -> bool:
        return self.node_type == NodeType.SYMLINK

    @property
    def is_dirlike(self) -> bool:
        if self.node_type == NodeType.DIR:
            return True
        return self.is_symlink and self.is_dir

    @property
    def indicator(self) -> str:
        if self.node_type == NodeType.DIR:
            return "/"
        if self.node_type == NodeType.FILE and self.executable:
            return "*"
        if self.node_type == NodeType.SYMLINK:
            return "@"
        if self.node_type == NodeType.FIFO:
            return "|"
        if self.node_type == NodeType.SOCKET:
            return "="
        return ""


@dataclass(frozen=True)
class Name:
    name: str
    path: Path
    file_type: FileType
    extension: str | None = None

    @classmethod
    def from_path(cls, path: Path, file_type: FileType) -> Name:
        name = path.name or str(path)
        extension = None
        stem, dot, suffix = name.rpartition(".")
        if dot and stem and suffix:
            extension = suffix
        return cls(name=name, path=path, file_type=file_type, extension=extension)

    def with_name(self, name: str) -> Name:
        return replace(self, name=name)


@dataclass(frozen=True)
class SymLink:
    target: str | None = None
    valid: bool = False

    @classmethod
    def from_path(cls, path: Path) -> SymLink:
        try:
            target = os.readlink(path)
        except OSError:
            return cls()
        try:
            valid = path.exists()
        except OSError:
            valid = False
        return cls(target=target, valid=valid)


@dataclass(frozen=True)
class Owner:
    user: str
    group: str


@dataclass(frozen=True)
class AccessControl:
    has_acl: bool = False
    selinux_context: str = ""
    smack_context: str = ""

    @property
    def has_context(self) -> bool:
        return bool(self.selinux_context or self.smack_context)

    @property
    def indicator(self) -> str:
        if self.has_acl:
            return "+"
        if self.has_context:
            return "."
        return ""


@dataclass(frozen=True)
class Attributes:
    inode: int
    links: int
    size: int
    date: datetime
    owner: Owner
    permissions: Permissions
    access_control: AccessControl

    def with_size(self, size: int) -> Attributes:
        return replace(self, size=size)


@dataclass
class MetadataRecord:
    name: Name
    path: Path
    file_type: FileType
    symlink: SymLink
    attributes: Attributes | None = None
    content: list[MetadataRecord] | None = None
    is_dot_entry: bool = False

    @property
    def is_broken(self) -> bool:
        return self.attributes is None

    @property
    def size(self) -> int | None:
        return None if self.attributes is None else self.attributes.size

    @property
    def inode(self) -> int | None:
        return None if self.attributes is None else self.attributes.inode

    @property
    def links(self) -> int | None:
        return None if self.attributes is None else self.attributes.links

    @property
    def date(self) -> datetime | None:
        return None if self.attributes is None else self.attributes.date

    @property
    def owner(self) -> Owner | None:
        return None if self.attributes is None else self.attributes.owner

    @property
    def permissions(self) -> Permissions | None:
        return None if self.attributes is None else self.attributes.permissions

    @property
    def access_control(self) -> AccessControl | None:
        return None if self.attributes is None else self.attributes.access_control

    def as_dot_entry(self, name: str) -> MetadataRecord:
        """Copy shown as a `.` or `..` pseudo-entry, never expanded."""
        return replace(
            self, name=self.name.with_name(name), content=None, is_dot_entry=True
        )
