from typing import Optional, Tuple

from ..config import Coverage
from ..tree.syntax_tree import BODY, ELSE, STATEMENT, SUBSTATEMENT, ExpressionKind, StatementKind, SyntaxTree
from .annotations import AnnotationLocator
from .statements import CONTROL_KINDS

# Statements whose direct statement children are standalone positions
STATEMENT_HOLDERS = (StatementKind.COMPOUND, StatementKind.CASE, StatementKind.LABEL)

# Control statement slots that hold a substatement
SUBSTATEMENT_ROLES = (BODY, ELSE)


class PositionResolver:
    """
    Decides which statements may carry the annotation.

    Attribute slots are transparent: a statement wrapped in one occupies the
    position of its outermost wrapper.
    """

    def __init__(self, tree: SyntaxTree, annotations: AnnotationLocator, coverage=Coverage.ALWAYS):
        self.tree = tree
        self.annotations = annotations
        self.coverage = coverage

    def outermost(self, node):
        wrappers = self.annotations.wrappers(node)
        return wrappers[-1] if wrappers else node

    def effective_parent(self, node) -> Tuple[Optional[int], Optional[str]]:
        position = self.outermost(node)
        return self.tree.parent(position), self.tree.role(position)

    def is_candidate(self, node) -> bool:
        return self.tree.is_statement(node) and not self.tree.is_statement(
            node, StatementKind.ATTRIBUTED, StatementKind.DECLARATION
        )

    def is_eligible(self, node) -> bool:
        if not self.is_candidate(node):
            return False
        if self.tree.role(node) == SUBSTATEMENT and self.outermost(node) == node:
            # substatement slot of something that is not an attribute slot
            return False
        parent, role = self.effective_parent(node)
        if parent is None:
            return False
        if self.tree.is_statement(parent, *STATEMENT_HOLDERS):
            return role == STATEMENT
        if self.tree.is_statement(parent, *CONTROL_KINDS):
            # an unbraced substatement stands alone in an implicit block
            return role in SUBSTATEMENT_ROLES
        if self.tree.is_statement(parent, StatementKind.TRY):
            return role in (BODY, STATEMENT)
        return False

    def is_covered(self, node) -> bool:
        """Whether an annotated statement above node already accounts for it."""
        if self.coverage is Coverage.HEADER_ONLY:
            return False
        position = self.outermost(node)
        for ancestor in self.tree.ancestors(position):
            if self.tree.is_expression(ancestor, ExpressionKind.LAMBDA):
                # coverage stops at a lambda body
                return False
            if self.tree.is_statement(ancestor, StatementKind.ATTRIBUTED):
                continue
            if self.tree.is_statement(ancestor) and self.annotations.has_annotation(ancestor):
                return True
        return False
