from typing import List, Optional

from loguru import logger

from ..config import CheckOptions
from ..diagnostics import CHECK_NAME, Category, Diagnostic
from ..tree.syntax_tree import NodeKind, SyntaxTree
from .annotations import AnnotationLocator
from .expressions import ExpressionClassifier
from .positions import PositionResolver
from .statements import StatementClassifier, Verdict


class VisibleExceptionPropagationCheck:
    """
    Reports declarations and statements whose exception propagation
    annotation does not match whether they can throw.

    Declarations are judged by their initializer wherever they occur.
    Statements are judged only at eligible positions, by the classification
    of their kind, and count as non-throwing when an annotated statement
    above them already covers them.
    """

    name = CHECK_NAME

    def __init__(self, options: Optional[CheckOptions] = None):
        self.options = options or CheckOptions()

    def run(self, tree: SyntaxTree) -> List[Diagnostic]:
        pass_ = _CheckPass(tree, self.options)
        diagnostics = []
        for node in tree.walk():
            kind = tree.kind(node)
            if kind is NodeKind.DECLARATION:
                found = pass_.check_declaration(node)
            elif kind is NodeKind.STATEMENT:
                found = pass_.check_statement(node)
            else:
                continue
            if found is not None:
                diagnostics.append(found)
        logger.info("{}: {} diagnostic(s) over {} node(s)", tree.file_name, len(diagnostics), len(tree))
        return diagnostics


class _CheckPass:
    """Per-tree wiring of the classifiers; lives for a single run()."""

    def __init__(self, tree, options):
        self.tree = tree
        self.options = options
        self.expressions = ExpressionClassifier(tree, options.unresolved_callees_throw)
        self.statements = StatementClassifier(tree, self.expressions)
        self.annotations = AnnotationLocator(tree, options.annotation)
        self.positions = PositionResolver(tree, self.annotations, options.coverage)

    def check_declaration(self, node) -> Optional[Diagnostic]:
        throws = self.expressions.contains_throwing_expr(node)
        marked = self.annotations.has_annotation(node)
        return self._judge(
            node, throws, marked,
            Category.DECL_MISSING_ANNOTATION, Category.DECL_SUPERFLUOUS_ANNOTATION,
        )

    def check_statement(self, node) -> Optional[Diagnostic]:
        if not self.positions.is_eligible(node):
            return None
        verdict = self.statements.classify(node)
        if verdict is Verdict.EXCLUDED:
            return None
        throws = verdict is Verdict.THROWS and not self.positions.is_covered(node)
        marked = self.annotations.has_annotation(node)
        return self._judge(
            node, throws, marked,
            Category.STMT_MISSING_ANNOTATION, Category.STMT_SUPERFLUOUS_ANNOTATION,
        )

    def _judge(self, node, throws, marked, missing, superfluous):
        logger.debug("{} {!r}: throws={} marked={}", node, self.tree.label(node), throws, marked)
        if throws and not marked:
            return Diagnostic.create(missing, self.tree.location(node), self.options.annotation, node)
        if marked and not throws:
            site = self.annotations.annotation_site(node)
            return Diagnostic.create(superfluous, self.tree.location(site), self.options.annotation, node)
        return None
