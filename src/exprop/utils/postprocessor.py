import json
from enum import Enum
from subprocess import check_call

import networkx as nx
from networkx.readwrite import json_graph

# DOT reserved keywords that need to be quoted
dot_reserved_keywords = {
    'node', 'edge', 'graph', 'digraph', 'subgraph', 'strict',
    'Node', 'Edge', 'Graph', 'Digraph', 'Subgraph', 'Strict'
}


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def plain_graph(tree):
    """Copy of a SyntaxTree's graph with every attribute reduced to a JSON value."""
    graph = nx.DiGraph()
    for node, data in tree.graph.nodes(data=True):
        attributes = {key: _plain(value) for key, value in data.items()}
        callee = data.get("callee")
        if callee is not None:
            attributes["callee"] = callee.name
            attributes["callee_no_throw"] = callee.is_no_throw
            attributes["callee_extern_linkage"] = callee.is_extern_linkage
        graph.add_node(node, **attributes)
    for u, v, data in tree.graph.edges(data=True):
        graph.add_edge(u, v, **{key: _plain(value) for key, value in data.items()})
    return graph


def networkx_to_json(tree):
    """Convert a SyntaxTree to a node-link json object"""
    return json_graph.node_link_data(plain_graph(tree))


def write_networkx_to_json(tree, filename):
    graph_json = networkx_to_json(tree)
    with open(filename, "w") as f:
        json.dump(graph_json, f)
    return graph_json


def _escape_label(label):
    label = str(label)
    # Escape backslashes first (before other replacements) to preserve escape sequences
    label = label.replace('\\', '\\\\')
    label = label.replace('"', '\\"')
    label = label.replace('\n', ' ')
    label = label.replace('\r', ' ')
    return f'"{label}"'


def to_dot(tree):
    graph = plain_graph(tree)
    for node, data in graph.nodes(data=True):
        kind = data.get("subkind") or data.get("kind")
        data["label"] = _escape_label(f"{kind}: {data.get('label', '')}")
        # pydot reserves "name" for the node id
        data["marker"] = data.pop("name", None)
        for attr_name in list(data):
            if attr_name != "label":
                value = str(data[attr_name])
                data[attr_name] = _escape_label(value) if value in dot_reserved_keywords or ":" in value else value
    for u, v, data in graph.edges(data=True):
        data["label"] = _escape_label(data.pop("role", "") or "")
    return nx.nx_pydot.to_pydot(graph)


def write_to_dot(tree, filename, output_png=False):
    to_dot(tree).write_raw(filename)
    if output_png:
        check_call(
            ["dot", "-Tpng", filename, "-o", filename.rsplit(".", 1)[0] + ".png"]
        )


def diagnostics_to_json(diagnostics):
    return [diagnostic.to_dict() for diagnostic in diagnostics]


def write_diagnostics_to_json(diagnostics, filename):
    diagnostics_json = diagnostics_to_json(diagnostics)
    with open(filename, "w") as f:
        json.dump(diagnostics_json, f, indent=2)
    return diagnostics_json
