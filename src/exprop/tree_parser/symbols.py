from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..analysis.throw_predicate import can_throw
from ..tree.syntax_tree import CallableReference
from ..utils import cpp_nodes
from ..utils.cpp_nodes import node_text, simple_name
from ..utils.src_parser import traverse_tree


@dataclass(frozen=True)
class FunctionRecord:
    reference: CallableReference
    required: int
    maximum: float
    copies: bool = False

    def accepts(self, argc):
        return self.required <= argc <= self.maximum


class CallableTable:
    """
    Name-based resolution of calls and constructions within one
    translation unit.

    Every function, member function and constructor declaration is recorded
    under its unqualified name together with its exception specification
    and linkage. Overloads are told apart by argument count only.
    """

    def __init__(self, root_node):
        self.functions = defaultdict(list)
        self.constructors = defaultdict(list)
        self.classes = set()
        self.collect(root_node)

    def collect(self, root_node):
        for node in traverse_tree(root_node):
            if node.type in cpp_nodes.statement_types["class_types"]:
                if node.child_by_field_name("body") is not None:
                    name = simple_name(node.child_by_field_name("name"))
                    if name:
                        self.classes.add(name)
            elif node.type in cpp_nodes.statement_types["function_holders"]:
                for declarator in node.children_by_field_name("declarator"):
                    if cpp_nodes.is_function_declarator(declarator):
                        self.add_function(node, cpp_nodes.unwrap_declarator(declarator))
        logger.debug(
            "collected {} function name(s), {} class(es)",
            len(self.functions), len(self.classes),
        )

    def add_function(self, node, declarator):
        name_node = declarator.child_by_field_name("declarator")
        if name_node is None or name_node.type == "destructor_name":
            return
        name = simple_name(name_node)
        if not name:
            return

        owner = None
        if name_node.type == "qualified_identifier":
            owner = simple_name(name_node.child_by_field_name("scope"))
        else:
            enclosing_class = cpp_nodes.get_enclosing_class(node)
            if enclosing_class is not None:
                owner = simple_name(enclosing_class.child_by_field_name("name"))

        required, maximum = cpp_nodes.count_parameters(declarator)
        qualified = f"{owner}::{name}" if owner else name
        record = FunctionRecord(
            CallableReference(
                qualified,
                is_no_throw=cpp_nodes.has_noexcept_specifier(declarator),
                is_extern_linkage=cpp_nodes.is_extern_c(node),
            ),
            required,
            maximum,
            copies=owner is not None and self.takes_own_class(declarator, owner),
        )
        if owner is not None and owner == name:
            self.constructors[owner].append(record)
        else:
            self.functions[name].append(record)

    @staticmethod
    def takes_own_class(declarator, class_name):
        """Whether the first parameter names the class itself, as copy and move constructors do."""
        types = cpp_nodes.parameter_types(declarator)
        return bool(types) and type_name(types[0]) == class_name

    def is_class(self, name) -> bool:
        return name in self.classes

    def resolve_call(self, name, argc) -> Optional[CallableReference]:
        candidates = self.functions.get(name)
        if not candidates:
            logger.debug("no declaration of {} in this translation unit", name)
            return None
        return self.select(candidates, argc)

    def resolve_construct(self, class_name, argc) -> Optional[CallableReference]:
        if not self.is_class(class_name):
            return None
        candidates = self.constructors.get(class_name)
        if not candidates:
            return self.implicit_constructor(class_name)
        return self.select(candidates, argc)

    def resolve_copy(self, class_name) -> Optional[CallableReference]:
        """Constructor run when an object is initialized from another of its class."""
        if not self.is_class(class_name):
            return None
        candidates = [record for record in self.constructors.get(class_name, []) if record.copies]
        if not candidates:
            return self.implicit_constructor(class_name)
        return self.select(candidates, 1)

    @staticmethod
    def implicit_constructor(class_name) -> CallableReference:
        return CallableReference(f"{class_name}::{class_name}", is_no_throw=True)

    @staticmethod
    def select(candidates, argc) -> CallableReference:
        matching = [record for record in candidates if record.accepts(argc)] or candidates
        for record in matching:
            if can_throw(record.reference):
                return record.reference
        return matching[0].reference


def type_name(type_node):
    """Class name used by a declaration's type specifier, if it names one."""
    if type_node is None:
        return None
    if type_node.type in ["type_identifier", "qualified_identifier", "template_type"]:
        return simple_name(type_node)
    if type_node.type in ["class_specifier", "struct_specifier", "union_specifier"]:
        return simple_name(type_node.child_by_field_name("name"))
    if type_node.type == "placeholder_type_specifier":
        return None
    return node_text(type_node) or None
