from __future__ import annotations

import io
import os
from datetime import UTC, datetime
from pathlib import Path

import pytest
from rich.console import Console

from lsmeta.config import WalkConfig
from lsmeta.diagnostics import ErrorReporter
from lsmeta.models import (
    AccessControl,
    Attributes,
    FileType,
    Layout,
    MetadataRecord,
    Name,
    NodeType,
    Owner,
    Permissions,
    SymLink,
)
from lsmeta.platform_meta import PosixMetadataProvider


def mk_record(
    path: Path,
    *,
    node_type: NodeType = NodeType.FILE,
    size: int | None = 0,
    content: list[MetadataRecord] | None = None,
    is_dir: bool = False,
) -> MetadataRecord:
    file_type = FileType(node_type, is_dir=is_dir)
    attributes = None
    if size is not None:
        attributes = Attributes(
            inode=1,
            links=1,
            size=size,
            date=datetime(2026, 1, 1, tzinfo=UTC),
            owner=Owner(user="user", group="group"),
            permissions=Permissions.from_mode(0o644),
            access_control=AccessControl(),
        )
    return MetadataRecord(
        name=Name.from_path(path, file_type),
        path=path,
        file_type=file_type,
        symlink=SymLink(),
        attributes=attributes,
        content=content,
    )


class StubProvider(PosixMetadataProvider):
    """POSIX provider with names flagged as system protected by the test."""

    def __init__(self, system_names: set[str] | None = None) -> None:
        super().__init__()
        self.system_names = system_names or set()

    def is_system_protected(self, path: Path) -> bool:
        return path.name in self.system_names


class CapturingReporter(ErrorReporter):
    def __init__(self) -> None:
        self.buffer = io.StringIO()
        super().__init__(Console(file=self.buffer, width=400, highlight=False))

    @property
    def lines(self) -> list[str]:
        return self.buffer.getvalue().splitlines()


@pytest.fixture
def reporter() -> CapturingReporter:
    return CapturingReporter()


@pytest.fixture
def tree_config() -> WalkConfig:
    return WalkConfig(layout=Layout.TREE)


requires_symlinks = pytest.mark.skipif(
    not hasattr(os, "symlink") or os.name == "nt",
    reason="symlinks need POSIX semantics",
)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """root/{a.txt (10 bytes), .hidden, empty/, nested/{b.bin (5 bytes), deep/c.txt (3 bytes)}}"""
    root = tmp_path / "root"
    (root / "empty").mkdir(parents=True)
    (root / "nested" / "deep").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"0123456789")
    (root / ".hidden").write_bytes(b"h")
    (root / "nested" / "b.bin").write_bytes(b"12345")
    (root / "nested" / "deep" / "c.txt").write_bytes(b"abc")
    return root


def names(records: list[MetadataRecord] | None) -> list[str]:
    assert records is not None
    return sorted(record.name.name for record in records)
