"""Tree-sitter C++ parsing and query execution.

Thin wrapper that loads the C++ grammar once, compiles queries once, and
returns query matches as ``{capture_name: node}`` dicts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import tree_sitter
import tree_sitter_cpp
from tree_sitter import Query, QueryCursor

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


class CppParser:
    """Parses C++ source and runs structural queries over it."""

    def __init__(self) -> None:
        self._language = tree_sitter.Language(tree_sitter_cpp.language())
        self._parser = tree_sitter.Parser(self._language)
        self._queries: dict[str, Query] = {}

    def parse(self, code: str) -> Tree:
        return self._parser.parse(code.encode("utf-8"))

    def _get_query(self, query_string: str) -> Query:
        """Compile and cache a query."""
        query = self._queries.get(query_string)
        if query is None:
            query = Query(self._language, query_string)
            self._queries[query_string] = query
        return query

    def run_query(self, query_string: str, node: Node) -> list[dict[str, Node]]:
        """Execute a query under ``node`` and return captures grouped by match."""
        cursor = QueryCursor(self._get_query(query_string))
        results: list[dict[str, Node]] = []
        for _pattern_idx, captures_dict in cursor.matches(node):
            # captures_dict is dict[str, list[Node]] - take the first node per capture
            match = {name: nodes[0] for name, nodes in captures_dict.items() if nodes}
            if match:
                results.append(match)
        return results


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""
