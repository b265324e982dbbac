from .syntax_tree import (
    CallableReference,
    ExpressionKind,
    NodeKind,
    SourceLocation,
    StatementKind,
    SyntaxTree,
)
