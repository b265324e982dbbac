from loguru import logger

from ..tree.syntax_tree import ExpressionKind, NodeKind, SyntaxTree
from .throw_predicate import can_throw

INVOKING_KINDS = (ExpressionKind.CALL, ExpressionKind.CONSTRUCT)


class ExpressionClassifier:
    """
    Decides whether an expression is, or contains, a throwing call or
    construction. Descent follows expression operands only: a lambda body is
    a nested statement and belongs to its own statement positions.

    Nothing is cached between queries.
    """

    def __init__(self, tree: SyntaxTree, unresolved_callees_throw=False):
        self.tree = tree
        self.unresolved_callees_throw = unresolved_callees_throw

    def is_throwing_call(self, node) -> bool:
        if not self.tree.is_expression(node, *INVOKING_KINDS):
            return False
        ref = self.tree.callee(node)
        if ref is None:
            logger.debug("unresolved target for {}", self.tree.label(node))
            return self.unresolved_callees_throw
        return can_throw(ref)

    def is_throwing_expr(self, node) -> bool:
        if not self.tree.is_expression(node):
            return False
        stack = [node]
        while stack:
            current = stack.pop()
            if self.is_throwing_call(current):
                return True
            stack.extend(
                child for child in self.tree.children(current)
                if self.tree.is_expression(child)
            )
        return False

    def contains_throwing_expr(self, node) -> bool:
        """
        Throw classification of the expression slots directly owned by node.

        For a declaration that is its initializer; for a statement, every
        expression or declaration child (never a nested statement).
        """
        kind = self.tree.kind(node)
        if kind is NodeKind.EXPRESSION:
            return self.is_throwing_expr(node)
        if kind is NodeKind.DECLARATION:
            return any(self.is_throwing_expr(child) for child in self.tree.children(node))
        if kind is NodeKind.STATEMENT:
            return self.slots_throw(self.tree.children(node))
        return False

    def slots_throw(self, slots) -> bool:
        for slot in slots:
            kind = self.tree.kind(slot)
            if kind is NodeKind.EXPRESSION and self.is_throwing_expr(slot):
                return True
            if kind is NodeKind.DECLARATION and self.contains_throwing_expr(slot):
                return True
        return False
