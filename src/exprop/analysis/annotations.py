from typing import List, Optional

from ..tree.builder import DEFAULT_ANNOTATION
from ..tree.syntax_tree import ANNOTATION, SUBSTATEMENT, NodeKind, StatementKind, SyntaxTree


def same_annotation(name, expected) -> bool:
    """clang::maybe_unhandled and maybe_unhandled name the same marker."""
    if not name or not expected:
        return False
    return name.split("::")[-1].strip() == expected.split("::")[-1].strip()


class AnnotationLocator:
    def __init__(self, tree: SyntaxTree, annotation_name=DEFAULT_ANNOTATION):
        self.tree = tree
        self.annotation_name = annotation_name

    def wrappers(self, node) -> List[int]:
        """Attribute slots around node, innermost first."""
        found = []
        current = node
        while self.tree.role(current) == SUBSTATEMENT:
            parent = self.tree.parent(current)
            if not self.tree.is_statement(parent, StatementKind.ATTRIBUTED):
                break
            found.append(parent)
            current = parent
        return found

    def annotation_names(self, node) -> List[str]:
        return [
            self.tree.name(child)
            for child in self.tree.children(node, ANNOTATION)
            if self.tree.kind(child) is NodeKind.ANNOTATION
        ]

    def carries_marker(self, node) -> bool:
        return any(same_annotation(name, self.annotation_name) for name in self.annotation_names(node))

    def has_annotation(self, node) -> bool:
        kind = self.tree.kind(node)
        if kind is NodeKind.DECLARATION:
            return self.carries_marker(node)
        if kind is NodeKind.STATEMENT:
            return any(self.carries_marker(wrapper) for wrapper in self.wrappers(node))
        return False

    def annotation_site(self, node) -> Optional[int]:
        """Node whose location spans the annotation attached to node."""
        if self.tree.kind(node) is NodeKind.DECLARATION:
            return node
        wrappers = self.wrappers(node)
        return wrappers[-1] if wrappers else node
