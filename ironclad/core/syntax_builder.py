"""
Syntax Builder — Maps a tree-sitter Rust tree onto the engine's syntax view.

Every named tree-sitter node becomes a SyntaxNode so parent links stay
faithful; node types outside the closed kind set become NodeKind.IGNORED.
Macro token trees are opaque to tree-sitter, so only unexpanded macro call
sites are visible.

Rust-specific shaping:
  - closure parameters hang directly off the closure node
  - `impl Trait for Type` gets a synthetic trait_impl_header child spanning
    `impl ... for Type`
  - `x[a..b]` (index operand is a range) is a slice, anything else an index
  - `x.m(..)` (call through a field expression) is a method call

The conversion uses an explicit work stack, so left-deep expressions such
as long `a + b + c + ...` chains cannot exhaust the recursion limit.
"""

from __future__ import annotations

import logging

from tree_sitter import Node, Tree

from ironclad.core.parser import RustParser
from ironclad.models.syntax_models import NodeKind, Position, Span, SyntaxNode

logger = logging.getLogger("ironclad.syntax_builder")

# Tree-sitter nodes still to convert, each with the view node it attaches to
Pending = list[tuple[Node, SyntaxNode]]


def _node_text(node: Node, source: bytes) -> str:
    """Extract source text for a node."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _span(start: Node, end: Node | None = None) -> Span:
    end = end or start
    return Span(
        start=Position(line=start.start_point[0] + 1, column=start.start_point[1] + 1),
        end=Position(line=end.end_point[0] + 1, column=end.end_point[1] + 1),
    )


def _has_token(node: Node | None, token: str) -> bool:
    return node is not None and any(child.type == token for child in node.children)


def _is_parameter(node: Node) -> bool:
    """Real closure parameters: patterns and `parameter` nodes, plus bare `_`."""
    if node.is_extra:
        return False
    return node.is_named or node.type == "_"


def _method_name(call: Node, source: bytes) -> str | None:
    """Method name of `recv.name(..)` / `recv.name::<T>(..)`, else None."""
    function = call.child_by_field_name("function")
    if function is not None and function.type == "generic_function":
        function = function.child_by_field_name("function")
    if function is None or function.type != "field_expression":
        return None
    field = function.child_by_field_name("field")
    return _node_text(field, source) if field is not None else None


class _SyntaxBuilder:
    """Converts one tree-sitter tree into SyntaxNodes."""

    def __init__(self, source: bytes) -> None:
        self.source = source

    def build(self, root: Node) -> SyntaxNode:
        view, pending = self._convert(root)
        stack: Pending = list(reversed(pending))
        while stack:
            node, parent = stack.pop()
            child, pending = self._convert(node)
            parent.add_child(child)
            # Reversed so children attach in source order
            stack.extend(reversed(pending))
        return view

    def _convert(self, node: Node) -> tuple[SyntaxNode, Pending]:
        handler = getattr(self, f"_build_{node.type}", None)
        if handler is not None:
            return handler(node)
        view = SyntaxNode(kind=NodeKind.IGNORED, span=_span(node))
        return view, self._children(view, node)

    @staticmethod
    def _children(view: SyntaxNode, node: Node) -> Pending:
        return [(child, view) for child in node.named_children]

    def _text(self, node: Node | None) -> str:
        return _node_text(node, self.source) if node is not None else ""

    # ── Bindings ──

    def _build_let_declaration(self, node: Node) -> tuple[SyntaxNode, Pending]:
        pattern = node.child_by_field_name("pattern")
        view = SyntaxNode(
            kind=NodeKind.LET_BINDING,
            span=_span(node),
            name=self._text(pattern),
            annotated=node.child_by_field_name("type") is not None,
            wildcard=pattern is not None and pattern.type == "_",
        )
        return view, self._children(view, node)

    def _build_closure_expression(self, node: Node) -> tuple[SyntaxNode, Pending]:
        view = SyntaxNode(kind=NodeKind.CLOSURE, span=_span(node))
        pending: Pending = []
        for child in node.named_children:
            if child.type != "closure_parameters":
                pending.append((child, view))
                continue
            for param in child.children:
                if not _is_parameter(param):
                    continue
                param_view = view.add_child(self._closure_parameter(param))
                pending.extend(self._children(param_view, param))
        return view, pending

    def _closure_parameter(self, param: Node) -> SyntaxNode:
        if param.type == "parameter":
            pattern = param.child_by_field_name("pattern")
            return SyntaxNode(
                kind=NodeKind.CLOSURE_PARAMETER,
                span=_span(param),
                name=self._text(pattern),
                annotated=param.child_by_field_name("type") is not None,
                wildcard=pattern is not None and pattern.type == "_",
            )
        return SyntaxNode(
            kind=NodeKind.CLOSURE_PARAMETER,
            span=_span(param),
            name=self._text(param),
            wildcard=param.type == "_",
        )

    # ── Items ──

    def _build_function_item(self, node: Node) -> tuple[SyntaxNode, Pending]:
        modifiers = next(
            (c for c in node.children if c.type == "function_modifiers"), None
        )
        view = SyntaxNode(
            kind=NodeKind.FUNCTION_ITEM,
            span=_span(node),
            name=self._text(node.child_by_field_name("name")),
            unsafe=_has_token(modifiers, "unsafe"),
        )
        return view, self._children(view, node)

    # Bodiless trait methods: `unsafe fn f();`
    _build_function_signature_item = _build_function_item

    def _build_trait_item(self, node: Node) -> tuple[SyntaxNode, Pending]:
        view = SyntaxNode(
            kind=NodeKind.TRAIT_ITEM,
            span=_span(node),
            name=self._text(node.child_by_field_name("name")),
            unsafe=_has_token(node, "unsafe"),
        )
        return view, self._children(view, node)

    def _build_impl_item(self, node: Node) -> tuple[SyntaxNode, Pending]:
        view = SyntaxNode(
            kind=NodeKind.IMPL_ITEM,
            span=_span(node),
            name=self._text(node.child_by_field_name("type")),
            unsafe=_has_token(node, "unsafe"),
        )
        trait = node.child_by_field_name("trait")
        implemented = node.child_by_field_name("type")
        if trait is None or implemented is None:
            return view, self._children(view, node)

        header = view.add_child(
            SyntaxNode(
                kind=NodeKind.TRAIT_IMPL_HEADER,
                span=_span(node, implemented),
                name=self._text(trait),
            )
        )
        pending: Pending = []
        for child in node.named_children:
            target = header if child.end_byte <= implemented.end_byte else view
            pending.append((child, target))
        return view, pending

    def _build_unsafe_block(self, node: Node) -> tuple[SyntaxNode, Pending]:
        view = SyntaxNode(kind=NodeKind.UNSAFE_BLOCK, span=_span(node))
        return view, self._children(view, node)

    # ── Calls ──

    def _build_macro_invocation(self, node: Node) -> tuple[SyntaxNode, Pending]:
        view = SyntaxNode(
            kind=NodeKind.MACRO_INVOCATION,
            span=_span(node),
            name=self._text(node.child_by_field_name("macro")),
        )
        return view, self._children(view, node)

    def _build_call_expression(self, node: Node) -> tuple[SyntaxNode, Pending]:
        method = _method_name(node, self.source)
        view = SyntaxNode(
            kind=NodeKind.METHOD_CALL if method is not None else NodeKind.IGNORED,
            span=_span(node),
            name=method or "",
        )
        return view, self._children(view, node)

    # ── Indexing ──

    def _build_index_expression(self, node: Node) -> tuple[SyntaxNode, Pending]:
        operands = node.named_children
        is_slice = len(operands) == 2 and operands[1].type == "range_expression"
        view = SyntaxNode(
            kind=NodeKind.SLICE_EXPRESSION if is_slice else NodeKind.INDEX_EXPRESSION,
            span=_span(node),
        )
        return view, self._children(view, node)


def build_syntax_view(tree: Tree, source: bytes) -> SyntaxNode:
    """Convert a parsed tree-sitter tree into the root SyntaxNode."""
    if tree.root_node.has_error:
        logger.debug("Source contains syntax errors; analysing partial tree")
    return _SyntaxBuilder(source).build(tree.root_node)


def parse_rust(code: str, strict: bool = False) -> SyntaxNode:
    """Parse Rust source and return its syntax view."""
    tree, source = RustParser().parse(code, strict=strict)
    return build_syntax_view(tree, source)
