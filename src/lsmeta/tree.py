from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .config import WalkConfig
from .diagnostics import ErrorReporter
from .models import MetadataRecord, Severity
from .platform_meta import PlatformMetadataProvider, default_provider
from .resolver import resolve
from .sizes import finalize_sizes
from .walker import TreeWalker


@dataclass(frozen=True)
class TreeResult:
    root: MetadataRecord
    severity: Severity


def build_tree(
    path: Path | str,
    config: WalkConfig,
    *,
    provider: PlatformMetadataProvider | None = None,
    reporter: ErrorReporter | None = None,
) -> TreeResult:
    """Resolve `path`, expand it per `config` and finalize directory sizes.

    Raises OSError when `path` itself cannot be stat-ed.
    """
    provider = provider or default_provider()
    reporter = reporter or ErrorReporter()

    root = resolve(path, config.dereference, provider=provider, reporter=reporter)
    walker = TreeWalker(config, provider=provider, reporter=reporter)
    root.content, severity = walker.expand(root, config.recursion_depth())
    if config.total_size:
        finalize_sizes(root, reporter)
    return TreeResult(root=root, severity=severity)


def iter_records(root: MetadataRecord) -> Iterator[MetadataRecord]:
    """Yield `root` and its descendants in pre-order."""
    yield root
    for child in root.content or ():
        yield from iter_records(child)
