from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .tree.syntax_tree import SourceLocation

CHECK_NAME = "readability-visible-exception-propagation"


class Category(Enum):
    DECL_MISSING_ANNOTATION = "DeclMissingAnnotation"
    DECL_SUPERFLUOUS_ANNOTATION = "DeclSuperfluousAnnotation"
    STMT_MISSING_ANNOTATION = "StmtMissingAnnotation"
    STMT_SUPERFLUOUS_ANNOTATION = "StmtSuperfluousAnnotation"


MESSAGES = {
    Category.DECL_MISSING_ANNOTATION: "declaration may throw, add '[[{annotation}]]'",
    Category.DECL_SUPERFLUOUS_ANNOTATION: "declaration cannot throw, remove '[[{annotation}]]'",
    Category.STMT_MISSING_ANNOTATION: "statement may throw, add '[[{annotation}]]'",
    Category.STMT_SUPERFLUOUS_ANNOTATION: "statement cannot throw, remove '[[{annotation}]]'",
}


@dataclass(frozen=True)
class Diagnostic:
    location: SourceLocation
    category: Category
    message: str
    node: Optional[int] = None

    @classmethod
    def create(cls, category, location, annotation, node=None):
        return cls(location, category, MESSAGES[category].format(annotation=annotation), node)

    def to_dict(self):
        return {
            "file": self.location.file,
            "line": self.location.line,
            "column": self.location.column,
            "category": self.category.value,
            "message": self.message,
        }


def format_diagnostic(diagnostic: Diagnostic, check_name=CHECK_NAME) -> str:
    return f"{diagnostic.location}: warning: {diagnostic.message} [{check_name}]"
