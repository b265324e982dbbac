import pytest

from exprop.analysis.checker import VisibleExceptionPropagationCheck
from exprop.config import CheckOptions
from exprop.tree import CallableReference
from exprop.tree_parser.parser_driver import ParserDriver

FOO = CallableReference("foo")
BAR = CallableReference("bar", is_no_throw=True)
EXTERN = CallableReference("c_api", is_extern_linkage=True)


def categories(diagnostics):
    return [d.category.value for d in diagnostics]


def run_check(tree, **properties):
    return VisibleExceptionPropagationCheck(CheckOptions.from_properties(properties)).run(tree)


@pytest.fixture
def parse_cpp():
    def parse(src_code):
        return ParserDriver("cpp", src_code, "test.cpp").tree
    return parse


def find(tree, label):
    """First node in document order carrying label."""
    for node in tree.walk():
        if tree.label(node) == label:
            return node
    raise LookupError(label)
