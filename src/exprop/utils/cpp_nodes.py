statement_types = {
    "function_holders": [
        "function_definition",
        "declaration",
        "field_declaration",
    ],
    "class_types": [
        "class_specifier",
        "struct_specifier",
        "union_specifier",
    ],
    "unevaluated_operands": [
        "sizeof_expression",
        "alignof_expression",
        "decltype",
        "noexcept",
        "requires_expression",
        "template_argument_list",
    ],
}

declarator_wrappers = [
    "pointer_declarator",
    "reference_declarator",
    "parenthesized_declarator",
    "attributed_declarator",
]

name_types = [
    "identifier",
    "field_identifier",
    "type_identifier",
    "namespace_identifier",
    "destructor_name",
    "operator_name",
]


def get_child_of_type(node, type_list):
    """Get first child of node matching any type in type_list"""
    out = list(filter(lambda x: x.type in type_list, node.children))
    if len(out) > 0:
        return out[0]
    else:
        return None


def node_text(node):
    if node is None:
        return ""
    return node.text.decode("utf-8")


def inner_declarator(node):
    """The declarator one wrapper layer below node."""
    inner = node.child_by_field_name("declarator")
    if inner is None:
        inner = get_child_of_type(node, ["function_declarator", "array_declarator", "identifier", *declarator_wrappers])
    return inner


def unwrap_declarator(node):
    """Strip pointer/reference/parenthesis layers from a declarator."""
    while node is not None and node.type in declarator_wrappers:
        node = inner_declarator(node)
    return node


def get_declarator_attributes(node):
    """Attribute names written after the declarator-id, as in int x [[attr]]."""
    attributes = []
    while node is not None and node.type in declarator_wrappers:
        if node.type == "attributed_declarator":
            attributes.extend(get_attributes(node))
        node = inner_declarator(node)
    return attributes


def is_function_declarator(declarator):
    """Whether declarator declares a function, not a pointer or reference to one."""
    inner = unwrap_declarator(declarator)
    if inner is None or inner.type != "function_declarator":
        return False
    nested = inner.child_by_field_name("declarator")
    while nested is not None and nested.type in ["parenthesized_declarator", "attributed_declarator"]:
        nested = inner_declarator(nested)
    return nested is None or nested.type not in ["pointer_declarator", "reference_declarator"]


def declarator_name(declarator):
    """Name declared by a declarator: the x in (*x)(int) or x[4]."""
    node = declarator
    while node is not None:
        if node.type in declarator_wrappers:
            node = inner_declarator(node)
        elif node.type in ["function_declarator", "array_declarator", "init_declarator"]:
            node = node.child_by_field_name("declarator")
        else:
            return simple_name(node)
    return None


def parameter_types(declarator):
    """Type nodes of a function_declarator's parameters, in order."""
    parameters = declarator.child_by_field_name("parameters") if declarator else None
    if parameters is None:
        return []
    return [
        param.child_by_field_name("type")
        for param in parameters.named_children
        if param.type in ["parameter_declaration", "optional_parameter_declaration"]
    ]


def simple_name(node):
    """Unqualified name of an identifier-like node: ns::Foo<int>::bar -> bar."""
    while node is not None:
        if node.type in name_types:
            return node_text(node)
        if node.type in ["qualified_identifier", "template_function", "template_type", "template_method"]:
            node = node.child_by_field_name("name")
        elif node.type == "field_expression":
            node = node.child_by_field_name("field")
        elif node.type in ["parenthesized_expression", "pointer_expression"]:
            node = node.named_children[-1] if node.named_children else None
        else:
            return None
    return None


def has_noexcept_specifier(declarator):
    """
    Whether a function_declarator carries a non-throwing exception
    specification: noexcept, noexcept(true) or throw().
    """
    if declarator is None:
        return False

    for child in declarator.children:
        if child.type == "noexcept":
            argument = child.named_children[0] if child.named_children else None
            if argument is None:
                return True
            return node_text(argument).strip() != "false"
        if child.type == "throw_specifier":
            return len(child.named_children) == 0
    return False


def get_attributes(node):
    """Attribute names from the attribute_declaration children of node."""
    attributes = []
    for child in node.children:
        if child.type == "attribute_declaration":
            for attr_child in child.named_children:
                if attr_child.type == "attribute":
                    attr_text = node_text(attr_child)
                    attr_name = attr_text.split("(")[0].strip()
                    attributes.append(attr_name)
    return attributes


def count_arguments(arguments):
    if arguments is None:
        return 0
    return len([child for child in arguments.named_children if child.type != "comment"])


def count_parameters(declarator):
    """Parameter count range (required, maximum) of a function_declarator."""
    parameters = declarator.child_by_field_name("parameters") if declarator else None
    if parameters is None:
        return 0, 0
    required = 0
    maximum = 0
    for param in parameters.children:
        if param.type in ["...", "variadic_parameter_declaration"]:
            maximum = float("inf")
        elif param.type == "optional_parameter_declaration":
            maximum += 1
        elif param.type == "parameter_declaration":
            if node_text(param).strip() == "void" and len(parameters.named_children) == 1:
                continue
            required += 1
            maximum += 1
    return required, maximum


def is_extern_c(node):
    """Whether node sits inside an extern "C" linkage specification."""
    current = node.parent
    while current is not None:
        if current.type == "linkage_specification":
            value = current.child_by_field_name("value")
            return node_text(value).strip('"') == "C"
        current = current.parent
    return False


def get_enclosing_class(node):
    current = node.parent
    while current is not None:
        if current.type in statement_types["class_types"]:
            return current
        if current.type in ["function_definition", "compound_statement", "translation_unit"]:
            return None
        current = current.parent
    return None
