from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import WalkConfig
from .diagnostics import ErrorReporter
from .models import Display, Layout, MetadataRecord, NodeType, Severity
from .platform_meta import PlatformMetadataProvider, default_provider
from .resolver import resolve

logger = logging.getLogger(__name__)


class TreeWalker:
    """Expands directory records into their resolved children, depth first.

    Per-entry failures are reported and folded into the returned severity;
    they never abort the sibling loop. Followed directory symlinks are not
    checked for cycles, so a link back to an ancestor is only bounded by
    the depth limit.
    """

    def __init__(
        self,
        config: WalkConfig,
        provider: PlatformMetadataProvider | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self.config = config
        self.provider = provider or default_provider()
        self.reporter = reporter or ErrorReporter()

    def _resolve(self, path: Path) -> MetadataRecord:
        return resolve(
            path,
            self.config.dereference,
            provider=self.provider,
            reporter=self.reporter,
        )

    def _is_expandable(self, record: MetadataRecord) -> bool:
        config = self.config
        if config.display == Display.DIRECTORY_ONLY and config.layout != Layout.TREE:
            return False
        file_type = record.file_type
        if file_type.node_type == NodeType.DIR:
            return True
        if file_type.is_symlink and file_type.is_dir:
            return config.layout != Layout.ONELINE
        return False

    def _is_filtered(self, path: Path) -> bool:
        display = self.config.display
        if display in (Display.ALL, Display.ALMOST_ALL):
            return self.provider.is_system_protected(path)
        if display == Display.VISIBLE_ONLY:
            if self.provider.is_hidden(path):
                return True
            return self.provider.is_system_protected(path)
        return False

    def _dot_entries(self, record: MetadataRecord) -> tuple[list[MetadataRecord], Severity]:
        entries = [record.as_dot_entry(".")]
        parent_path = record.path / ".."
        try:
            parent = self._resolve(parent_path)
        except OSError as exc:
            self.reporter.report(parent_path, exc)
            return entries, Severity.MINOR_ISSUE
        entries.append(parent.as_dot_entry(".."))
        return entries, Severity.OK

    def _skip_non_directory(self, entry: os.DirEntry[str]) -> bool:
        if not (
            self.config.layout == Layout.TREE
            and self.config.display == Display.DIRECTORY_ONLY
        ):
            return False
        try:
            return not entry.is_dir(follow_symlinks=False)
        except OSError:
            return True

    def expand(
        self, record: MetadataRecord, depth: int | None
    ) -> tuple[list[MetadataRecord] | None, Severity]:
        """Resolve the children of `record` down to `depth` levels.

        `depth` of None is unlimited and 0 never expands. Returns None
        instead of a list when `record` is not expanded at all.
        """
        if depth == 0 or not self._is_expandable(record):
            return None, Severity.OK

        try:
            scanner = os.scandir(record.path)
        except OSError as exc:
            self.reporter.report(record.path, exc)
            return None, Severity.MINOR_ISSUE

        config = self.config
        child_depth = None if depth is None else depth - 1
        content: list[MetadataRecord] = []
        severity = Severity.OK

        with scanner:
            if (
                config.display in (Display.ALL, Display.SYSTEM_PROTECTED)
                and config.layout != Layout.TREE
            ):
                content, severity = self._dot_entries(record)

            try:
                for entry in scanner:
                    if config.ignore_globs.is_match(entry.name):
                        continue
                    path = Path(entry.path)
                    if self._is_filtered(path):
                        continue

                    try:
                        child = self._resolve(path)
                    except OSError as exc:
                        self.reporter.report(path, exc)
                        severity = max(severity, Severity.MINOR_ISSUE)
                        continue

                    if self._skip_non_directory(entry):
                        continue

                    if config.dereference or not child.file_type.is_symlink:
                        try:
                            child.content, child_severity = self.expand(child, child_depth)
                        except OSError as exc:
                            self.reporter.report(path, exc)
                            child_severity = Severity.MINOR_ISSUE
                        severity = max(severity, child_severity)

                    content.append(child)
            except OSError as exc:
                self.reporter.report(record.path, exc)
                severity = max(severity, Severity.MINOR_ISSUE)

        logger.debug(
            "Expanded %s: %d entries, severity %s",
            record.path,
            len(content),
            severity.name,
        )
        return content, severity
