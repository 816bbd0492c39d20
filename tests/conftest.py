"""
Test fixtures shared across all Ironclad tests.
"""

import pytest

from ironclad.models.syntax_models import NodeKind, Span, SyntaxNode


@pytest.fixture
def make_node():
    """Factory for hand-built syntax nodes: make_node(kind, span, *children, **facts)."""

    def _make(kind=NodeKind.IGNORED, span=(1, 1, 100, 1), *children, **facts):
        node = SyntaxNode(kind=kind, span=Span.of(*span), **facts)
        for child in children:
            node.add_child(child)
        return node

    return _make


@pytest.fixture
def missing_type_code():
    """Let bindings and closures with and without annotations."""
    return '''
fn main() {
    let x = 5;

    let y: i32 = 10;

    let _ = 42;

    let add: fn(i32, i32) -> i32 = |a, b| a + b;

    let sub = |a: i32, b: i32| a - b;

    let mul = |a: i32, b| a * b;
    let _: i32 = mul(2, 3);

    let ignore: fn(i32) -> i32 = |_| 0;
}

async fn async_with_let() -> i32 {
    let value: i32 = 10;
    value
}
'''


@pytest.fixture
def panic_code():
    """Every panicking call form once."""
    return '''
fn main() {
    let x: Option<i32> = None;
    x.unwrap();
    x.expect("");

    panic!("");

    assert!(false);
    assert_eq!(0, 1);
    assert_ne!(0, 0);

    todo!();
    unimplemented!();
    unreachable!();
}
'''


@pytest.fixture
def indexing_code():
    """Indexing, slicing and an Index implementation."""
    return '''
use std::ops::Index;

struct MyVec(Vec<i32>);

impl Index<usize> for MyVec {
    type Output = i32;

    fn index(&self, index: usize) -> &Self::Output {
        &self.0[index]
    }
}

fn main() {
    let array: [i32; 3] = [1, 2, 3];
    let x: i32 = array[0];
    let slice: &[i32] = &array[1..];
}
'''


@pytest.fixture
def unsafe_code():
    """Unsafe items and blocks next to their safe counterparts."""
    return '''
unsafe fn unsafe_function() {}
fn safe_function() {}

unsafe trait UnsafeTrait {}
trait SafeTrait {}

struct MyType;

unsafe impl UnsafeTrait for MyType {}
impl SafeTrait for MyType {}

fn main() {
    unsafe {
        unsafe_function();
    }

    {
        safe_function();
    }
}
'''


@pytest.fixture
def clean_code():
    """Rust code no built-in rule should flag."""
    return '''
fn add(a: i32, b: i32) -> i32 {
    let total: i32 = a + b;
    total
}

fn first(values: &[i32]) -> Option<&i32> {
    let head: Option<&i32> = values.get(0);
    head
}
'''
