from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from .models import MetadataRecord, NodeType

_TYPE_CHARS = {
    NodeType.FILE: "-",
    NodeType.DIR: "d",
    NodeType.SYMLINK: "l",
    NodeType.BLOCK_DEVICE: "b",
    NodeType.CHAR_DEVICE: "c",
    NodeType.FIFO: "p",
    NodeType.SOCKET: "s",
    NodeType.SPECIAL: "?",
}


def _mode_column(record: MetadataRecord) -> str:
    type_char = _TYPE_CHARS[record.file_type.node_type]
    if record.attributes is None:
        return f"{type_char}?????????"
    access = record.attributes.access_control.indicator
    return f"{type_char}{record.attributes.permissions.symbolic()}{access}"


def record_label(record: MetadataRecord, *, classify: bool = False) -> Text:
    name = record.name.name
    if classify:
        name = f"{name}{record.file_type.indicator}"
    name_style = "bold blue" if record.file_type.is_dirlike else "white"

    attrs = record.attributes
    owner = f"{attrs.owner.user} {attrs.owner.group}" if attrs else "? ?"
    size = str(attrs.size) if attrs else "?"
    label = Text.assemble(
        (_mode_column(record), "green"),
        " ",
        (owner, "yellow"),
        " ",
        (size, "cyan"),
        " ",
        (name, name_style),
    )
    if record.symlink.target is not None:
        target_style = "magenta" if record.symlink.valid else "red"
        label.append(" ⇒ ")
        label.append(record.symlink.target, style=target_style)
    return label


def build_rich_tree(root: MetadataRecord, *, classify: bool = False) -> Tree:
    tree = Tree(record_label(root, classify=classify))
    _add_children(tree, root, classify)
    return tree


def _add_children(branch: Tree, record: MetadataRecord, classify: bool) -> None:
    for child in record.content or ():
        node = branch.add(record_label(child, classify=classify))
        _add_children(node, child, classify)
