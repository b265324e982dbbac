import pytest
from conftest import BAR, EXTERN, FOO, categories, find, run_check

from exprop.diagnostics import Category, format_diagnostic
from exprop.tree.builder import (
    NodeSpec,
    annotated,
    build,
    call,
    case,
    compound,
    construct,
    decl_stmt,
    do_,
    expr,
    expr_stmt,
    for_,
    if_,
    lambda_,
    return_stmt,
    switch,
    throw,
    var,
    while_,
)
from exprop.tree.syntax_tree import NodeKind, StatementKind

MISSING = Category.STMT_MISSING_ANNOTATION.value
SUPERFLUOUS = Category.STMT_SUPERFLUOUS_ANNOTATION.value
DECL_MISSING = Category.DECL_MISSING_ANNOTATION.value
DECL_SUPERFLUOUS = Category.DECL_SUPERFLUOUS_ANNOTATION.value


def test_call_statements():
    tree = build(compound(
        expr_stmt(call(FOO), label="foo", line=2),
        expr_stmt(call(BAR), label="bar", line=3),
        annotated(expr_stmt(call(FOO), label="marked foo", line=4)),
        annotated(expr_stmt(call(BAR), label="marked bar", line=5)),
    ))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING, SUPERFLUOUS]
    assert diagnostics[0].node == find(tree, "foo")
    assert diagnostics[0].location.line == 2
    assert diagnostics[0].message == "statement may throw, add '[[maybe_unhandled]]'"
    assert diagnostics[1].node == find(tree, "marked bar")
    assert diagnostics[1].location.line == 5
    assert diagnostics[1].message == "statement cannot throw, remove '[[maybe_unhandled]]'"


def test_extern_linkage_call_needs_no_annotation():
    tree = build(compound(expr_stmt(call(EXTERN)), annotated(expr_stmt(call(EXTERN)))))
    assert categories(run_check(tree)) == [SUPERFLUOUS]


def test_throwing_declaration_is_reported_once_at_declaration():
    tree = build(compound(decl_stmt(var("x", call(FOO), line=2), line=2)))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [DECL_MISSING]
    assert diagnostics[0].node == find(tree, "x")
    assert diagnostics[0].message == "declaration may throw, add '[[maybe_unhandled]]'"


def test_declaration_annotations():
    tree = build(compound(decl_stmt(
        var("a", call(FOO), annotated=True),
        var("b", call(BAR), annotated=True),
        var("c", construct(FOO)),
        var("d"),
    )))
    assert categories(run_check(tree)) == [DECL_SUPERFLUOUS, DECL_MISSING]


def test_namespace_scope_declarations_are_checked():
    tree = build(var("global", call(FOO)), var("quiet", call(BAR), annotated=True))
    assert categories(run_check(tree)) == [DECL_MISSING, DECL_SUPERFLUOUS]


def test_annotated_if_with_non_throwing_body():
    tree = build(compound(annotated(if_(call(FOO), compound(expr_stmt(call(BAR), label="bar"))))))
    assert run_check(tree) == []


def test_unannotated_if_reports_header_at_if():
    tree = build(compound(if_(call(FOO), compound(expr_stmt(call(BAR))))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "if")


def test_throwing_body_is_reported_at_body_statement():
    tree = build(compound(if_(call(BAR), compound(expr_stmt(call(FOO), label="body")))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "body")


def annotated_if_with_throwing_body():
    return build(compound(annotated(if_(call(FOO), compound(expr_stmt(call(FOO), label="body"))))))


def test_annotated_header_covers_its_body():
    assert run_check(annotated_if_with_throwing_body()) == []


def test_header_only_coverage_reports_body():
    tree = annotated_if_with_throwing_body()
    diagnostics = run_check(tree, coverage="header-only")
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "body")


def test_annotation_below_covering_statement_is_superfluous():
    tree = build(compound(annotated(while_(call(FOO), compound(
        annotated(expr_stmt(call(FOO), label="inner")),
    )))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [SUPERFLUOUS]
    assert diagnostics[0].node == find(tree, "inner")
    assert run_check(tree, coverage="header-only") == []


def test_annotated_header_that_cannot_throw():
    tree = build(compound(annotated(if_(call(BAR), compound(expr_stmt(call(FOO), label="body"))))))
    assert categories(run_check(tree)) == [SUPERFLUOUS]
    assert categories(run_check(tree, coverage="header-only")) == [SUPERFLUOUS, MISSING]


def test_declarations_are_checked_inside_covered_bodies():
    tree = build(compound(annotated(if_(call(FOO), compound(decl_stmt(var("v", call(FOO))))))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [DECL_MISSING]
    assert diagnostics[0].node == find(tree, "v")


def test_condition_declaration_reports_statement_and_declaration():
    tree = build(compound(if_(var("p", call(FOO)), compound())))
    assert categories(run_check(tree)) == [MISSING, DECL_MISSING]


@pytest.mark.parametrize("statement", [
    for_(init=var("i", call(BAR)), condition=call(FOO), body=compound()),
    for_(increment=call(FOO), body=compound()),
    for_(init=expr(call(FOO)), body=compound()),
    while_(call(FOO), compound()),
    do_(compound(), call(FOO)),
    switch(call(FOO), compound()),
    if_(call(BAR), compound(), init=call(FOO)),
    return_stmt(call(FOO)),
])
def test_control_headers_and_regular_statements(statement):
    diagnostics = run_check(build(compound(statement)))
    assert categories(diagnostics) == [MISSING]


def test_for_with_throwing_loop_variable():
    tree = build(compound(for_(init=var("i", call(FOO)), body=compound())))
    assert categories(run_check(tree)) == [MISSING, DECL_MISSING]


def test_case_children_are_checked():
    tree = build(compound(switch(call(BAR), compound(
        case(expr(), expr_stmt(call(FOO), label="in-case")),
        case(None, expr_stmt(call(BAR))),
    ))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "in-case")


def test_explicit_throw_needs_no_annotation():
    tree = build(compound(throw(construct(FOO)), annotated(throw(construct(FOO)))))
    assert categories(run_check(tree)) == [SUPERFLUOUS]


def test_annotated_block_is_superfluous():
    tree = build(compound(annotated(compound(expr_stmt(call(FOO), label="x")))))
    assert categories(run_check(tree)) == [SUPERFLUOUS]
    assert categories(run_check(tree, coverage="header-only")) == [SUPERFLUOUS, MISSING]


def test_unbraced_substatement():
    tree = build(compound(if_(call(BAR), expr_stmt(call(FOO), label="then"))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "then")


def test_lambda_body_is_checked_on_its_own():
    tree = build(compound(expr_stmt(call(BAR, lambda_(compound(expr_stmt(call(FOO), label="in-lambda")))))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "in-lambda")


def test_unresolved_callees():
    tree = build(compound(expr_stmt(call(None, label="mystery()"))))
    assert run_check(tree) == []
    assert categories(run_check(tree, unresolved_callees_throw=True)) == [MISSING]


def test_custom_annotation_name_in_messages():
    tree = build(compound(annotated(expr_stmt(call(BAR)), "may_throw")))
    diagnostics = run_check(tree, annotation="may_throw")
    assert diagnostics[0].message == "statement cannot throw, remove '[[may_throw]]'"


def test_idempotent():
    tree = build(compound(
        expr_stmt(call(FOO)),
        decl_stmt(var("x", call(FOO))),
        annotated(if_(call(BAR), compound(expr_stmt(call(FOO))))),
    ))
    assert run_check(tree) == run_check(tree)


def test_malformed_nodes_are_not_matches():
    broken = NodeSpec(NodeKind.STATEMENT, label="unknown")
    tree = build(compound(
        annotated(None),
        if_(),
        while_(body=annotated(None)),
        broken,
    ))
    assert run_check(tree) == []


def test_text_format():
    tree = build(compound(expr_stmt(call(FOO), line=7).at(7, 5)), file_name="a.cpp")
    (diagnostic,) = run_check(tree)
    assert format_diagnostic(diagnostic) == (
        "a.cpp:7:5: warning: statement may throw, add '[[maybe_unhandled]]' "
        "[readability-visible-exception-propagation]"
    )


def test_statement_kinds_are_exhaustively_classified():
    from exprop.analysis.expressions import ExpressionClassifier
    from exprop.analysis.statements import StatementClassifier

    tree = build(compound())
    classifier = StatementClassifier(tree, ExpressionClassifier(tree))
    assert set(classifier.dispatch) == set(StatementKind)


def test_annotated_statement_does_not_cover_lambda_body():
    tree = build(compound(annotated(expr_stmt(call(FOO, lambda_(compound(
        expr_stmt(call(FOO), label="in-lambda"),
    )))))))
    diagnostics = run_check(tree)
    assert categories(diagnostics) == [MISSING]
    assert diagnostics[0].node == find(tree, "in-lambda")
