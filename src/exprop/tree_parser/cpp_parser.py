from loguru import logger

from ..tree import builder
from ..utils import cpp_nodes
from ..utils.cpp_nodes import get_attributes, node_text, simple_name
from ..utils.src_parser import traverse_tree
from .symbols import CallableTable, type_name

# Statement types that lower to a plain regular statement without operands
JUMP_STATEMENTS = ["break_statement", "continue_statement", "goto_statement"]

# Block items with nothing to check
IGNORED_ITEMS = [
    "comment",
    "type_definition",
    "alias_declaration",
    "using_declaration",
    "namespace_alias_definition",
    "static_assert_declaration",
    "class_specifier",
    "struct_specifier",
    "union_specifier",
    "enum_specifier",
    "template_declaration",
    "function_definition",
    "preproc_include",
    "preproc_def",
    "preproc_function_def",
    "preproc_call",
]

PREPROC_CONDITIONALS = ["preproc_if", "preproc_ifdef", "preproc_else", "preproc_elif", "preproc_elifdef"]

# Initializers that already denote the object they initialize
DIRECT_INITIALIZERS = ["call_expression", "compound_literal_expression", "initializer_list"]

# Initializers that cannot already be an object of the initialized class
LITERALS = [
    "number_literal",
    "string_literal",
    "raw_string_literal",
    "concatenated_string",
    "char_literal",
    "true",
    "false",
    "nullptr",
    "user_defined_literal",
]


def _at(spec, node):
    if spec is not None and node is not None:
        row, column = node.start_point
        spec.at(row + 1, column + 1)
    return spec


class CppParser:
    """
    Lowers a tree-sitter C++ tree into a resolved SyntaxTree.

    Function bodies and namespace-scope variables become the roots of the
    tree. Calls and constructions are bound through a CallableTable built
    from the same translation unit.
    """

    def __init__(self, root_node, file_name="<memory>"):
        self.root_node = root_node
        self.file_name = file_name
        self.table = CallableTable(root_node)
        self.statement_map = {
            "compound_statement": self.lower_compound_statement,
            "declaration": self.lower_declaration,
            "attributed_statement": self.lower_attributed_statement,
            "expression_statement": self.lower_expression_statement,
            "return_statement": self.lower_return_statement,
            "throw_statement": self.lower_throw_statement,
            "if_statement": self.lower_if_statement,
            "while_statement": self.lower_while_statement,
            "do_statement": self.lower_do_statement,
            "for_statement": self.lower_for_statement,
            "for_range_loop": self.lower_for_range_loop,
            "switch_statement": self.lower_switch_statement,
            "case_statement": self.lower_case_statement,
            "labeled_statement": self.lower_labeled_statement,
            "try_statement": self.lower_try_statement,
        }
        self.tree = builder.build(*self.lower_translation_unit(root_node), file_name=file_name)

    def lower_translation_unit(self, root_node):
        roots = []
        for node in traverse_tree(root_node, finest_granularity=["function_definition", "lambda_expression"]):
            if node.type == "function_definition":
                body = node.child_by_field_name("body")
                if body is not None:
                    roots.append(self.lower_statement(body))
            elif node.type == "declaration":
                roots.extend(self.lower_declarators(node))
        return [root for root in roots if root is not None]

    # Declarations

    def lower_declarators(self, node):
        """One declaration spec per variable declared by a declaration node."""
        attributes = get_attributes(node)
        if node.parent is not None and node.parent.type == "attributed_statement":
            attributes = get_attributes(node.parent) + attributes

        class_name = type_name(node.child_by_field_name("type"))
        if not self.table.is_class(class_name):
            class_name = None

        declarators = node.children_by_field_name("declarator")
        specs = []
        for declarator in declarators:
            if declarator.type == "init_declarator":
                target = declarator.child_by_field_name("declarator")
                value = declarator.child_by_field_name("value")
            else:
                target = declarator
                # condition declarations carry their value on the declaration itself
                value = node.child_by_field_name("value") if len(declarators) == 1 else None

            if cpp_nodes.is_function_declarator(target):
                continue
            is_object = class_name is not None and target is not None and target.type not in [
                "pointer_declarator",
                "reference_declarator",
            ]
            name = cpp_nodes.declarator_name(target) or node_text(target)
            init = self.lower_initializer(value, class_name if is_object else None)
            annotations = attributes + cpp_nodes.get_declarator_attributes(target)
            specs.append(_at(builder.var(name, init, annotations=annotations), declarator))
        return specs

    def lower_initializer(self, value, class_name=None):
        if value is None:
            if class_name is None:
                return None
            return _at(builder.construct(self.table.resolve_construct(class_name, 0), label=class_name), value)

        if value.type in ["argument_list", "initializer_list"]:
            operands = self.lower_operands(value)
            if class_name is None:
                return _at(builder.expr(*operands, label=value.type), value)
            argc = cpp_nodes.count_arguments(value)
            return _at(builder.construct(self.table.resolve_construct(class_name, argc), *operands,
                                         label=class_name), value)

        lowered = self.lower_expression(value)
        if class_name is None or value.type in DIRECT_INITIALIZERS:
            return lowered
        if value.type in LITERALS:
            # a literal converts through a one-argument constructor
            constructor = self.table.resolve_construct(class_name, 1)
        else:
            constructor = self.table.resolve_copy(class_name)
        return _at(builder.construct(constructor, lowered, label=class_name), value)

    # Statements

    def block_items(self, node, skip=None):
        """Statement children of a block, flattening preprocessor conditionals."""
        for child in node.named_children:
            if skip is not None and child == skip:
                continue
            if child.type in PREPROC_CONDITIONALS:
                condition = child.child_by_field_name("condition") or child.child_by_field_name("name")
                yield from self.block_items(child, skip=condition)
            elif child.type in IGNORED_ITEMS or child.type.startswith("preproc_"):
                continue
            else:
                yield child

    def lower_block(self, node, skip=None):
        return [spec for spec in (self.lower_statement(child) for child in self.block_items(node, skip)) if spec]

    def lower_statement(self, node):
        if node is None:
            return None
        handler = self.statement_map.get(node.type)
        if handler is not None:
            return _at(handler(node), node)
        if node.type in JUMP_STATEMENTS:
            return _at(builder.expr_stmt(label=node.type), node)
        if node.type in IGNORED_ITEMS:
            return None
        logger.debug("lowering {} as a regular statement", node.type)
        return _at(builder.expr_stmt(self.lower_operands(node), label=node.type), node)

    def lower_compound_statement(self, node):
        return builder.compound(*self.lower_block(node))

    def lower_declaration(self, node):
        return builder.decl_stmt(*self.lower_declarators(node))

    def lower_attributed_statement(self, node):
        inner = [child for child in node.named_children if child.type != "attribute_declaration"]
        if not inner:
            return None
        statement = inner[-1]
        if statement.type == "declaration":
            # the attributes belong to the declared variables
            return self.lower_declaration(statement)
        lowered = self.lower_statement(statement)
        names = get_attributes(node)
        if lowered is None or not names:
            return lowered
        return builder.annotated(lowered, *names)

    def lower_expression_statement(self, node):
        expression = node.named_children[0] if node.named_children else None
        return builder.expr_stmt(self.lower_expression(expression))

    def lower_return_statement(self, node):
        expression = node.named_children[0] if node.named_children else None
        return builder.return_stmt(self.lower_expression(expression))

    def lower_throw_statement(self, node):
        expression = node.named_children[0] if node.named_children else None
        return builder.throw(self.lower_expression(expression))

    def lower_if_statement(self, node):
        init, condition = self.lower_condition(node.child_by_field_name("condition"))
        alternative = node.child_by_field_name("alternative")
        if alternative is not None and alternative.type == "else_clause":
            alternative = alternative.named_children[-1] if alternative.named_children else None
        return builder.if_(
            condition,
            self.lower_statement(node.child_by_field_name("consequence")),
            self.lower_statement(alternative),
            init=init,
        )

    def lower_while_statement(self, node):
        _, condition = self.lower_condition(node.child_by_field_name("condition"))
        return builder.while_(condition, self.lower_statement(node.child_by_field_name("body")))

    def lower_do_statement(self, node):
        return builder.do_(
            self.lower_statement(node.child_by_field_name("body")),
            self.lower_expression(node.child_by_field_name("condition")),
        )

    def lower_for_statement(self, node):
        init = []
        for initializer in node.children_by_field_name("initializer"):
            if initializer.type == "declaration":
                init.extend(self.lower_declarators(initializer))
            else:
                init.append(self.lower_expression(initializer))
        return builder.for_(
            init,
            self.lower_expression(node.child_by_field_name("condition")),
            self.lower_expression(node.child_by_field_name("update")),
            self.lower_statement(node.child_by_field_name("body")),
        )

    def lower_for_range_loop(self, node):
        # the range expression is evaluated once, ahead of the loop
        init = self.lower_init_statement(node.child_by_field_name("initializer"))
        return builder.for_(
            [init, self.lower_expression(node.child_by_field_name("right"))],
            body=self.lower_statement(node.child_by_field_name("body")),
        )

    def lower_switch_statement(self, node):
        init, condition = self.lower_condition(node.child_by_field_name("condition"))
        return builder.switch(condition, self.lower_statement(node.child_by_field_name("body")), init=init)

    def lower_case_statement(self, node):
        value = node.child_by_field_name("value")
        spec = builder.case(self.lower_expression(value), *self.lower_block(node, skip=value))
        spec.label = "case" if value is not None else "default"
        return spec

    def lower_labeled_statement(self, node):
        label = node.child_by_field_name("label")
        statements = self.lower_block(node, skip=label)
        return builder.labeled(node_text(label), statements[0] if statements else None)

    def lower_try_statement(self, node):
        handlers = [
            self.lower_statement(clause.child_by_field_name("body"))
            for clause in node.named_children
            if clause.type == "catch_clause"
        ]
        return builder.try_(self.lower_statement(node.child_by_field_name("body")), *handlers)

    def lower_init_statement(self, node):
        if node is not None and node.type == "init_statement":
            node = node.named_children[0] if node.named_children else None
        if node is None or node.type in IGNORED_ITEMS:
            return None
        if node.type == "declaration":
            return self.lower_declarators(node)
        if node.type == "expression_statement":
            return self.lower_expression(node.named_children[0] if node.named_children else None)
        return self.lower_expression(node)

    def lower_condition(self, clause):
        """(init-statement, condition) specs of a control statement header."""
        if clause is None:
            return None, None
        if clause.type != "condition_clause":
            return None, self.lower_expression(clause)
        init = self.lower_init_statement(clause.child_by_field_name("initializer"))
        value = clause.child_by_field_name("value")
        if value is not None and value.type == "declaration":
            return init, self.lower_declarators(value)
        return init, self.lower_expression(value)

    # Expressions

    def lower_operands(self, node):
        return [spec for spec in (self.lower_expression(child) for child in node.named_children) if spec]

    def lower_expression(self, node):
        if node is None or node.type in cpp_nodes.statement_types["unevaluated_operands"]:
            return None

        if node.type == "lambda_expression":
            return _at(builder.lambda_(self.lower_statement(node.child_by_field_name("body"))), node)

        if node.type == "call_expression":
            return _at(self.lower_call(node), node)

        if node.type in ["new_expression", "compound_literal_expression"]:
            class_name = type_name(node.child_by_field_name("type"))
            arguments = node.child_by_field_name("arguments") or node.child_by_field_name("value")
            operands = self.lower_operands(node)
            if self.table.is_class(class_name):
                argc = cpp_nodes.count_arguments(arguments)
                return _at(builder.construct(self.table.resolve_construct(class_name, argc), *operands,
                                             label=class_name), node)
            return _at(builder.expr(*operands, label=node.type), node) if operands else None

        operands = self.lower_operands(node)
        if not operands:
            return None
        return _at(builder.expr(*operands, label=node.type), node)

    def lower_call(self, node):
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        name = simple_name(function)
        argc = cpp_nodes.count_arguments(arguments)

        operands = []
        if function is not None and function.type not in cpp_nodes.name_types + ["qualified_identifier"]:
            # the callee expression itself may call, as in make().run()
            operands.extend(self.lower_operands(function))
        if arguments is not None:
            operands.extend(self.lower_operands(arguments))

        label = node_text(function) + "()"
        if name and self.table.is_class(name) and function.type in [
            "identifier", "type_identifier", "qualified_identifier", "template_type",
        ]:
            return builder.construct(self.table.resolve_construct(name, argc), *operands, label=label)
        return builder.call(self.table.resolve_call(name, argc) if name else None, *operands, label=label)
