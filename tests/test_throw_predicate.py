import pytest

from exprop.analysis.throw_predicate import can_throw
from exprop.tree import CallableReference


def test_plain_callable_can_throw():
    assert can_throw(CallableReference("foo"))


@pytest.mark.parametrize("extern", [False, True])
def test_no_throw_never_throws(extern):
    assert not can_throw(CallableReference("bar", is_no_throw=True, is_extern_linkage=extern))


@pytest.mark.parametrize("no_throw", [False, True])
def test_extern_linkage_never_throws(no_throw):
    assert not can_throw(CallableReference("c_api", is_no_throw=no_throw, is_extern_linkage=True))
