"""
Ironclad — Rust source parser using tree-sitter.
"""

from __future__ import annotations

import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser, Tree


RUST_LANGUAGE = Language(tsrust.language())


class RustParser:
    """Thin wrapper around tree-sitter for Rust source code."""

    def __init__(self) -> None:
        self._parser = Parser(RUST_LANGUAGE)

    def parse(self, code: str, strict: bool = False) -> tuple[Tree, bytes]:
        """Parse Rust source and return (tree, source_bytes).

        Partial trees are returned as-is; error nodes are analysed as
        ignored nodes. Raises ValueError on a tree with errors when
        `strict` is set.
        """
        source_bytes = code.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        if strict and tree.root_node.has_error:
            raise ValueError("Failed to parse Rust source code")
        return tree, source_bytes
