"""Method body extraction from tree-sitter Java ASTs."""

from __future__ import annotations

import tree_sitter
import tree_sitter_java

# Declarations that own a statement block
_METHOD_NODE_TYPES = frozenset({
    "method_declaration",
    "constructor_declaration",
})

_parser_cache: dict[str, tree_sitter.Parser] = {}


def _get_parser() -> tree_sitter.Parser:
    """Get or create the cached Java parser."""
    parser = _parser_cache.get("java")
    if parser is None:
        language = tree_sitter.Language(tree_sitter_java.language())
        parser = tree_sitter.Parser(language)
        _parser_cache["java"] = parser
    return parser


class MethodBodyIndex:
    """Method bodies of one source file, keyed by the name's line.

    The file is parsed on first lookup only, so files whose markers sit
    on fields and classes never pay for a parse.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._bodies: dict[int, str | None] | None = None

    def body_at(self, line_index: int) -> str | None:
        """Body of the method whose name sits on ``line_index`` (0-based)."""
        if self._bodies is None:
            self._bodies = _index_bodies(self._source)
        return self._bodies.get(line_index)


def _index_bodies(source: str) -> dict[int, str | None]:
    tree = _get_parser().parse(source.encode("utf-8"))
    bodies: dict[int, str | None] = {}
    stack: list[tree_sitter.Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type in _METHOD_NODE_TYPES:
            name = node.child_by_field_name("name")
            if name is not None:
                row = name.start_point[0]
                bodies.setdefault(row, _statements_text(node))
        stack.extend(reversed(node.children))
    return bodies


def _statements_text(node: tree_sitter.Node) -> str | None:
    """Top-level statements of the declaration's block, joined by newlines.

    Abstract and interface methods have no block and yield None, as does
    an empty block.
    """
    block = node.child_by_field_name("body")
    if block is None:
        return None
    statements = [
        child.text.decode("utf-8")
        for child in block.named_children
        if child.text is not None and not child.type.endswith("comment")
    ]
    text = "\n".join(statements).strip()
    return text or None
