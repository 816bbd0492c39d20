"""
Tests for VisitContext upward queries.
"""

from ironclad.core.syntax_view import VisitContext
from ironclad.models.syntax_models import NodeKind, Span, SyntaxNode


def test_ancestors_nearest_first(make_node):
    leaf = make_node(NodeKind.INDEX_EXPRESSION, (2, 5, 2, 9))
    block = make_node(NodeKind.UNSAFE_BLOCK, (2, 1, 2, 20), leaf)
    func = make_node(NodeKind.FUNCTION_ITEM, (1, 1, 3, 1), block)

    context = VisitContext(leaf)
    assert list(context.ancestors()) == [block, func]
    assert context.parent is block
    assert context.enclosing(NodeKind.FUNCTION_ITEM) is func
    assert context.is_within(NodeKind.UNSAFE_BLOCK)
    assert not context.is_within(NodeKind.CLOSURE)


def test_is_base_of_parent(make_node):
    base = make_node(NodeKind.INDEX_EXPRESSION, (1, 1, 1, 4))
    bound = make_node(NodeKind.INDEX_EXPRESSION, (1, 6, 1, 9))
    make_node(NodeKind.SLICE_EXPRESSION, (1, 1, 1, 10), base, bound)

    assert VisitContext(base).is_base_of_parent(NodeKind.SLICE_EXPRESSION)
    assert not VisitContext(bound).is_base_of_parent(NodeKind.SLICE_EXPRESSION)
    assert not VisitContext(base).is_base_of_parent(NodeKind.CLOSURE)


def test_root_has_no_context():
    root = SyntaxNode(kind=NodeKind.IGNORED, span=Span.of(1, 1, 1, 1))
    context = VisitContext(root)
    assert context.parent is None
    assert context.enclosing(NodeKind.IGNORED) is None
    assert not context.is_base_of_parent(NodeKind.SLICE_EXPRESSION)


def test_unknown_host_kind_maps_to_ignored():
    assert NodeKind.from_host("struct_item") == NodeKind.IGNORED
    assert NodeKind.from_host("unsafe_block") == NodeKind.UNSAFE_BLOCK
