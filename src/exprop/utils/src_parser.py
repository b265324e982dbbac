def traverse_tree(tree, finest_granularity=None):
    """
    Pre-order walk over a tree-sitter tree (or node) with a cursor.

    Nodes whose type is listed in finest_granularity are yielded but not
    descended into.
    """
    if finest_granularity is None:
        finest_granularity = []
    cursor = tree.walk()

    reached_root = False
    while not reached_root:
        yield cursor.node

        if cursor.node.type not in finest_granularity and cursor.goto_first_child():
            continue

        if cursor.goto_next_sibling():
            continue

        retracing = True
        while retracing:
            if not cursor.goto_parent():
                retracing = False
                reached_root = True

            if cursor.goto_next_sibling():
                retracing = False
