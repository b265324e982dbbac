from ..tree.syntax_tree import CallableReference


def can_throw(ref: CallableReference) -> bool:
    """
    Whether invoking ref can propagate an exception to the caller.

    A no-throw exception specification rules propagation out, and so does
    foreign-language linkage: exceptions never cross that boundary in a way
    the caller can observe.
    """
    return not (ref.is_no_throw or ref.is_extern_linkage)
