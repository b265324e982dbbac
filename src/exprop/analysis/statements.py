from enum import Enum

from loguru import logger

from ..tree.syntax_tree import CONDITION, INCREMENT, INIT, OPERAND, StatementKind, SyntaxTree
from .expressions import ExpressionClassifier


class Verdict(Enum):
    THROWS = "throws"
    NO_THROW = "no-throw"
    EXCLUDED = "excluded"


# Header slots whose expressions decide a control statement's classification
HEADER_ROLES = {
    StatementKind.IF: (INIT, CONDITION),
    StatementKind.FOR: (INIT, CONDITION, INCREMENT),
    StatementKind.WHILE: (CONDITION,),
    StatementKind.DO: (CONDITION,),
    StatementKind.SWITCH: (INIT, CONDITION),
}

CONTROL_KINDS = tuple(HEADER_ROLES)


class StatementClassifier:
    """Throw classification of a single statement, dispatched on its kind."""

    def __init__(self, tree: SyntaxTree, expressions: ExpressionClassifier):
        self.tree = tree
        self.expressions = expressions
        self.dispatch = {
            StatementKind.IF: self.classify_header,
            StatementKind.FOR: self.classify_header,
            StatementKind.WHILE: self.classify_header,
            StatementKind.DO: self.classify_header,
            StatementKind.SWITCH: self.classify_header,
            StatementKind.DECLARATION: self.classify_excluded,
            StatementKind.ATTRIBUTED: self.classify_excluded,
            StatementKind.COMPOUND: self.classify_never,
            StatementKind.THROW: self.classify_never,
            StatementKind.CASE: self.classify_never,
            StatementKind.LABEL: self.classify_never,
            StatementKind.TRY: self.classify_never,
            StatementKind.REGULAR: self.classify_regular,
        }

    def classify(self, node) -> Verdict:
        if not self.tree.is_statement(node):
            return Verdict.EXCLUDED
        handler = self.dispatch.get(self.tree.subkind(node))
        if handler is None:
            logger.debug("no classification for statement kind {}", self.tree.subkind(node))
            return Verdict.EXCLUDED
        return handler(node)

    def classify_header(self, node):
        slots = self.tree.children(node, *HEADER_ROLES[self.tree.subkind(node)])
        return self._verdict(self.expressions.slots_throw(slots))

    def classify_regular(self, node):
        return self._verdict(self.expressions.slots_throw(self.tree.children(node, OPERAND)))

    def classify_never(self, node):
        return Verdict.NO_THROW

    def classify_excluded(self, node):
        return Verdict.EXCLUDED

    @staticmethod
    def _verdict(throws):
        return Verdict.THROWS if throws else Verdict.NO_THROW
