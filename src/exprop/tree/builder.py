"""
Declarative construction of SyntaxTree instances.

Node specs are plain values describing a subtree; build() materializes one
or more of them into a frozen SyntaxTree. The C++ frontend lowers tree-sitter
nodes into specs, and tests write them by hand:

    tree = build(
        compound(
            expr_stmt(call(foo)),
            annotated(expr_stmt(call(bar))),
        )
    )
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .syntax_tree import (
    ANNOTATION,
    BODY,
    CONDITION,
    ELSE,
    INCREMENT,
    INIT,
    INITIALIZER,
    OPERAND,
    STATEMENT,
    SUBSTATEMENT,
    VALUE,
    CallableReference,
    ExpressionKind,
    NodeKind,
    SourceLocation,
    StatementKind,
    SyntaxTree,
)

DEFAULT_ANNOTATION = "maybe_unhandled"


@dataclass
class NodeSpec:
    kind: NodeKind
    subkind: object = None
    children: List[Tuple[str, "NodeSpec"]] = field(default_factory=list)
    label: str = ""
    callee: Optional[CallableReference] = None
    name: Optional[str] = None
    line: int = 0
    column: int = 0

    def add(self, role, spec):
        if isinstance(spec, (list, tuple)):
            for item in spec:
                self.add(role, item)
        elif spec is not None:
            self.children.append((role, spec))
        return self

    def at(self, line, column=1):
        self.line = line
        self.column = column
        return self


def _statement(subkind, label="", line=0):
    return NodeSpec(NodeKind.STATEMENT, subkind, label=label, line=line)


def _slots(spec, role, items):
    for item in items:
        spec.add(role, item)
    return spec


# Expressions

def call(callee=None, *operands, label="", line=0):
    spec = NodeSpec(NodeKind.EXPRESSION, ExpressionKind.CALL, callee=callee, line=line,
                    label=label or (callee.name + "()" if callee else "call"))
    return _slots(spec, OPERAND, operands)


def construct(callee=None, *operands, label="", line=0):
    spec = NodeSpec(NodeKind.EXPRESSION, ExpressionKind.CONSTRUCT, callee=callee, line=line,
                    label=label or (callee.name if callee else "construct"))
    return _slots(spec, OPERAND, operands)


def expr(*operands, label="expr", line=0):
    spec = NodeSpec(NodeKind.EXPRESSION, ExpressionKind.OTHER, label=label, line=line)
    return _slots(spec, OPERAND, operands)


def lambda_(body=None, label="lambda", line=0):
    spec = NodeSpec(NodeKind.EXPRESSION, ExpressionKind.LAMBDA, label=label, line=line)
    return spec.add(BODY, body)


# Declarations and annotations

def annotation(name=DEFAULT_ANNOTATION, line=0):
    return NodeSpec(NodeKind.ANNOTATION, name=name, label=f"[[{name}]]", line=line)


def var(name, init=None, annotated=False, annotations=(), line=0):
    spec = NodeSpec(NodeKind.DECLARATION, name=name, label=name, line=line)
    if annotated:
        spec.add(ANNOTATION, annotation(line=line))
    for annotation_name in annotations:
        spec.add(ANNOTATION, annotation(annotation_name, line=line))
    return spec.add(INITIALIZER, init)


# Statements

def expr_stmt(expression=None, label="", line=0):
    spec = _statement(StatementKind.REGULAR, label or "expression", line)
    return spec.add(OPERAND, expression)


def return_stmt(expression=None, line=0):
    return _statement(StatementKind.REGULAR, "return", line).add(OPERAND, expression)


def decl_stmt(*declarations, line=0):
    return _slots(_statement(StatementKind.DECLARATION, "declaration", line), STATEMENT, declarations)


def compound(*statements, line=0):
    return _slots(_statement(StatementKind.COMPOUND, "{}", line), STATEMENT, statements)


def if_(condition=None, then=None, else_=None, init=None, line=0):
    spec = _statement(StatementKind.IF, "if", line)
    return spec.add(INIT, init).add(CONDITION, condition).add(BODY, then).add(ELSE, else_)


def for_(init=None, condition=None, increment=None, body=None, line=0):
    spec = _statement(StatementKind.FOR, "for", line)
    return spec.add(INIT, init).add(CONDITION, condition).add(INCREMENT, increment).add(BODY, body)


def while_(condition=None, body=None, line=0):
    return _statement(StatementKind.WHILE, "while", line).add(CONDITION, condition).add(BODY, body)


def do_(body=None, condition=None, line=0):
    return _statement(StatementKind.DO, "do", line).add(BODY, body).add(CONDITION, condition)


def switch(condition=None, body=None, init=None, line=0):
    spec = _statement(StatementKind.SWITCH, "switch", line)
    return spec.add(INIT, init).add(CONDITION, condition).add(BODY, body)


def case(value=None, *statements, line=0):
    spec = _statement(StatementKind.CASE, "case" if value is not None else "default", line)
    spec.add(VALUE, value)
    return _slots(spec, STATEMENT, statements)


def labeled(name, statement=None, line=0):
    return _statement(StatementKind.LABEL, name + ":", line).add(STATEMENT, statement)


def throw(expression=None, line=0):
    return _statement(StatementKind.THROW, "throw", line).add(OPERAND, expression)


def try_(body=None, *handlers, line=0):
    spec = _statement(StatementKind.TRY, "try", line).add(BODY, body)
    return _slots(spec, STATEMENT, handlers)


def annotated(statement, *names, line=0):
    """Wrap statement in an attribute slot carrying the given annotations."""
    spec = _statement(StatementKind.ATTRIBUTED, "attributed", line or (statement.line if statement else 0))
    for name in names or (DEFAULT_ANNOTATION,):
        spec.add(ANNOTATION, annotation(name, line=spec.line))
    return spec.add(SUBSTATEMENT, statement)


def build(*roots, file_name="<memory>", freeze=True) -> SyntaxTree:
    tree = SyntaxTree(file_name)
    for root in roots:
        materialize(tree, root)
    if freeze:
        tree.freeze()
    return tree


def materialize(tree: SyntaxTree, spec: NodeSpec, parent=None, role=None) -> int:
    """Add spec and its subtree to tree, returning the id of the new node."""
    stack = [(spec, parent, role)]
    first = None
    while stack:
        current, parent_id, current_role = stack.pop()
        node_id = tree.add_node(
            current.kind,
            parent=parent_id,
            role=current_role,
            subkind=current.subkind,
            location=SourceLocation(tree.file_name, current.line, current.column),
            label=current.label,
            callee=current.callee,
            name=current.name,
        )
        if first is None:
            first = node_id
        for child_role, child in reversed(current.children):
            stack.append((child, node_id, child_role))
    return first
