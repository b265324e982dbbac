from conftest import BAR, FOO, find

from exprop.analysis.annotations import AnnotationLocator
from exprop.analysis.positions import PositionResolver
from exprop.config import Coverage
from exprop.tree.builder import (
    annotated,
    build,
    call,
    case,
    compound,
    decl_stmt,
    expr_stmt,
    for_,
    if_,
    labeled,
    lambda_,
    switch,
    try_,
    var,
    while_,
)


def resolver(tree, coverage=Coverage.ALWAYS):
    return PositionResolver(tree, AnnotationLocator(tree), coverage)


def test_block_children_are_eligible():
    tree = build(compound(expr_stmt(call(FOO), label="s"), compound(expr_stmt(label="nested"))))
    r = resolver(tree)
    assert r.is_eligible(find(tree, "s"))
    assert r.is_eligible(find(tree, "nested"))


def test_root_statement_is_not_eligible():
    tree = build(compound(), expr_stmt(call(FOO), label="loose"))
    r = resolver(tree)
    assert not r.is_eligible(find(tree, "{}"))
    assert not r.is_eligible(find(tree, "loose"))


def test_declaration_statements_and_wrappers_are_not_candidates():
    tree = build(compound(decl_stmt(var("x", call(FOO))), annotated(expr_stmt(label="s"))))
    r = resolver(tree)
    assert not r.is_candidate(find(tree, "declaration"))
    assert not r.is_candidate(find(tree, "attributed"))
    assert r.is_candidate(find(tree, "s"))


def test_wrapped_statement_takes_position_of_wrapper():
    tree = build(compound(annotated(if_(call(FOO), compound()))))
    r = resolver(tree)
    assert r.is_eligible(find(tree, "if"))
    parent, role = r.effective_parent(find(tree, "if"))
    assert tree.label(parent) == "{}"
    assert role == "statement"


def test_case_and_label_children_are_eligible():
    tree = build(compound(
        switch(call(BAR), compound(case(None, expr_stmt(label="in-case")))),
        labeled("retry", expr_stmt(label="in-label")),
    ))
    r = resolver(tree)
    assert r.is_eligible(find(tree, "in-case"))
    assert r.is_eligible(find(tree, "in-label"))


def test_unbraced_substatement_is_eligible():
    tree = build(compound(
        if_(call(BAR), expr_stmt(label="then"), expr_stmt(label="else")),
        while_(call(BAR), expr_stmt(label="loop")),
        for_(body=expr_stmt(label="for-body")),
    ))
    r = resolver(tree)
    for label in ["then", "else", "loop", "for-body"]:
        assert r.is_eligible(find(tree, label)), label


def test_try_blocks_are_eligible():
    tree = build(compound(try_(compound(expr_stmt(label="guarded")), compound(expr_stmt(label="handler")))))
    r = resolver(tree)
    assert r.is_eligible(find(tree, "guarded"))
    assert r.is_eligible(find(tree, "handler"))


def test_body_below_annotated_statement_is_covered():
    tree = build(compound(
        annotated(if_(call(FOO), compound(expr_stmt(call(FOO), label="inner")))),
        if_(call(FOO), compound(expr_stmt(call(FOO), label="plain"))),
    ))
    assert resolver(tree).is_covered(find(tree, "inner"))
    assert not resolver(tree).is_covered(find(tree, "plain"))
    assert not resolver(tree).is_covered(find(tree, "if"))
    assert not resolver(tree, Coverage.HEADER_ONLY).is_covered(find(tree, "inner"))


def test_lambda_body_is_not_covered_by_enclosing_annotation():
    tree = build(compound(annotated(expr_stmt(call(FOO, lambda_(compound(
        expr_stmt(call(FOO), label="in-lambda"),
    )))))))
    assert not resolver(tree).is_covered(find(tree, "in-lambda"))
