from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

import networkx as nx


class NodeKind(Enum):
    DECLARATION = "declaration"
    STATEMENT = "statement"
    EXPRESSION = "expression"
    ANNOTATION = "annotation"


class StatementKind(Enum):
    IF = "if"
    FOR = "for"
    WHILE = "while"
    DO = "do"
    SWITCH = "switch"
    CASE = "case"
    LABEL = "label"
    COMPOUND = "compound"
    DECLARATION = "declaration"
    THROW = "throw"
    TRY = "try"
    ATTRIBUTED = "attributed"
    REGULAR = "regular"


class ExpressionKind(Enum):
    CALL = "call"
    CONSTRUCT = "construct"
    LAMBDA = "lambda"
    OTHER = "other"


# Slot names carried on parent -> child edges
CONDITION = "condition"
INIT = "init"
INCREMENT = "increment"
BODY = "body"
ELSE = "else"
STATEMENT = "statement"
VALUE = "value"
SUBSTATEMENT = "substatement"
ANNOTATION = "annotation"
INITIALIZER = "initializer"
OPERAND = "operand"


@dataclass(frozen=True)
class CallableReference:
    """Resolved target of a call or construction."""
    name: str
    is_no_throw: bool = False
    is_extern_linkage: bool = False


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int
    column: int

    def __str__(self):
        return f"{self.file}:{self.line}:{self.column}"


class SyntaxTree:
    """
    Arena holding every node of one translation unit.

    Nodes are integer ids in a networkx DiGraph. An edge parent -> child
    records the child's role (the slot it occupies in its parent), and the
    order of a node's successors is the source order of its children. The
    parent relation is answered from the graph; nodes never hold references
    to each other.
    """

    def __init__(self, file_name="<memory>"):
        self.file_name = file_name
        self.graph = nx.DiGraph()
        self.roots = []
        self._next_id = 0

    def add_node(
        self,
        kind: NodeKind,
        parent: Optional[int] = None,
        role: Optional[str] = None,
        subkind=None,
        location: Optional[SourceLocation] = None,
        label: str = "",
        callee: Optional[CallableReference] = None,
        name: Optional[str] = None,
    ) -> int:
        if nx.is_frozen(self.graph):
            raise nx.NetworkXError("SyntaxTree is frozen")
        node_id = self._next_id
        self._next_id += 1
        if location is None:
            location = SourceLocation(self.file_name, 0, 0)
        self.graph.add_node(
            node_id,
            kind=kind,
            subkind=subkind,
            location=location,
            label=label,
            callee=callee,
            name=name,
        )
        if parent is None:
            self.roots.append(node_id)
        else:
            self.graph.add_edge(parent, node_id, role=role)
        return node_id

    def freeze(self):
        nx.freeze(self.graph)
        return self

    def __len__(self):
        return self.graph.number_of_nodes()

    def __contains__(self, node):
        return node in self.graph

    def kind(self, node) -> Optional[NodeKind]:
        if node not in self.graph:
            return None
        return self.graph.nodes[node]["kind"]

    def subkind(self, node):
        if node not in self.graph:
            return None
        return self.graph.nodes[node]["subkind"]

    def location(self, node) -> Optional[SourceLocation]:
        return self.graph.nodes[node]["location"]

    def label(self, node) -> str:
        return self.graph.nodes[node]["label"]

    def callee(self, node) -> Optional[CallableReference]:
        return self.graph.nodes[node]["callee"]

    def name(self, node) -> Optional[str]:
        return self.graph.nodes[node]["name"]

    def is_statement(self, node, *kinds) -> bool:
        if self.kind(node) is not NodeKind.STATEMENT:
            return False
        return not kinds or self.subkind(node) in kinds

    def is_expression(self, node, *kinds) -> bool:
        if self.kind(node) is not NodeKind.EXPRESSION:
            return False
        return not kinds or self.subkind(node) in kinds

    def parent(self, node) -> Optional[int]:
        if node not in self.graph:
            return None
        return next(iter(self.graph.predecessors(node)), None)

    def role(self, node) -> Optional[str]:
        parent = self.parent(node)
        if parent is None:
            return None
        return self.graph.edges[parent, node]["role"]

    def children(self, node, *roles) -> List[int]:
        if node not in self.graph:
            return []
        return [
            child
            for child, data in self.graph.adj[node].items()
            if not roles or data["role"] in roles
        ]

    def ancestors(self, node) -> Iterator[int]:
        parent = self.parent(node)
        while parent is not None:
            yield parent
            parent = self.parent(parent)

    def descendants(self, node) -> Iterator[int]:
        """Pre-order walk below node, node itself excluded."""
        stack = list(reversed(self.children(node)))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self.children(current)))

    def walk(self) -> Iterator[int]:
        """Pre-order walk over every root in insertion order."""
        for root in self.roots:
            yield root
            yield from self.descendants(root)
