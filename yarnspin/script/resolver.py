"""
Cross-reference resolution - turns parsed nodes into a Dialog graph.

Jump and option targets become indices into the Dialog's node tuple.
Nodes never hold references to each other, so cyclic graphs need no
special handling.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, Sequence, Union

from yarnspin.core.errors import DuplicateNodeTitleError, UnknownNodeReferenceError
from yarnspin.script.nodes import CommandLine, JumpLine, Node, OptionLine, OptionPossibility

logger = logging.getLogger(__name__)


class Dialog:
    """
    A loaded, fully resolved dialog.

    Owns its nodes for its whole lifetime. Every jump and option target
    in it is guaranteed to name one of them.
    """

    def __init__(self, dialog_id: str, nodes: Sequence[Node], index: dict[str, int]):
        self.id = dialog_id
        self.nodes: tuple[Node, ...] = tuple(nodes)
        self._index = index

    def __repr__(self) -> str:
        return f"Dialog(id={self.id!r}, nodes={len(self.nodes)})"

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __contains__(self, title: object) -> bool:
        return title in self._index

    @property
    def titles(self) -> list[str]:
        return [node.title for node in self.nodes]

    def index_of(self, title: str) -> Optional[int]:
        return self._index.get(title)

    def get_node(self, title: str) -> Optional[Node]:
        """Get a node by title."""
        index = self._index.get(title)
        return None if index is None else self.nodes[index]

    def node_at(self, index: int) -> Node:
        return self.nodes[index]

    def target_of(self, item: Union[JumpLine, OptionPossibility]) -> Node:
        """Dereference a resolved jump line or option possibility."""
        return self.nodes[item.target_index]

    def command_names(self) -> set[str]:
        """Names of every command any node can run."""
        return {
            line.func_name
            for node in self.nodes
            for line in node.lines
            if isinstance(line, CommandLine)
        }

    def reachable_from(self, title: str) -> set[str]:
        """Titles reachable from ``title`` through jumps and options (including itself)."""
        start = self._index.get(title)
        if start is None:
            return set()

        seen = {start}
        pending = [start]
        while pending:
            node = self.nodes[pending.pop()]
            for target in _targets(node):
                if target not in seen:
                    seen.add(target)
                    pending.append(target)
        return {self.nodes[i].title for i in seen}


def _targets(node: Node) -> Iterator[int]:
    for line in node.lines:
        if isinstance(line, JumpLine):
            yield line.target_index
        elif isinstance(line, OptionLine):
            for possibility in line.possibilities:
                yield possibility.target_index


def resolve_nodes(nodes: Iterable[Node], dialog_id: str = "dialog") -> Dialog:
    """
    Resolve every jump/option target and build a Dialog.

    Raises:
        DuplicateNodeTitleError: two nodes share a title
        UnknownNodeReferenceError: a target names no node
    """
    nodes = list(nodes)

    index: dict[str, int] = {}
    for position, node in enumerate(nodes):
        if node.title in index:
            raise DuplicateNodeTitleError(node.title)
        index[node.title] = position

    resolved = [_resolve_node(node, index) for node in nodes]
    logger.debug(f"Resolved {len(resolved)} nodes for dialog '{dialog_id}'")
    return Dialog(dialog_id, resolved, index)


def _resolve_node(node: Node, index: dict[str, int]) -> Node:
    lines = []
    for line in node.lines:
        if isinstance(line, JumpLine):
            line = line.replace(target_index=_lookup(line.node_title, node, index))
        elif isinstance(line, OptionLine):
            line = line.replace(possibilities=[
                p.replace(target_index=_lookup(p.jump_to_node_title, node, index))
                for p in line.possibilities
            ])
        lines.append(line)
    return node.replace(lines=lines)


def _lookup(title: str, source: Node, index: dict[str, int]) -> int:
    try:
        return index[title]
    except KeyError:
        raise UnknownNodeReferenceError(title, source.title) from None
