"""Inspection and visualisation of the environments an architect has built."""

from __future__ import annotations

from pathlib import Path

try:
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import SCOPE_COLORS
from .core import iter_chain

ECOSYSTEM_NODE = "ecosystem"
DEFAULT_NODE = "default"
BUILTINS_NODE = "builtins"


def _unit_node(index, unit):
    return f"unit{index}:{unit.path}"


def _known_layers(architect):
    return {
        id(architect.ecosystem): ECOSYSTEM_NODE,
        id(architect.loader.default_environment()): DEFAULT_NODE,
    }


def environment_layers(architect, unit):
    """Return the node names a unit's name lookups pass through, nearest first."""

    known = _known_layers(architect)
    layers = []
    for layer in iter_chain(unit.environment):
        name = known.get(id(layer))
        if name is None:
            name = "own" if layer is unit.environment else f"ns_{id(layer):x}"
        layers.append(name)
    layers.append(BUILTINS_NODE)
    return layers


def build_environment_graph(architect):
    """Return a directed graph of unit environments and what they delegate to."""

    if nx is None:
        raise RuntimeError("Environment graphs require networkx to be installed")

    graph = nx.DiGraph()
    graph.add_node(
        ECOSYSTEM_NODE,
        kind="ecosystem",
        names=len(architect.ecosystem),
        color=SCOPE_COLORS["ecosystem"],
    )
    graph.add_node(DEFAULT_NODE, kind="default", color=SCOPE_COLORS["default"])
    graph.add_node(BUILTINS_NODE, kind="builtins", color=SCOPE_COLORS["builtins"])
    graph.add_edge(DEFAULT_NODE, BUILTINS_NODE, relation="builtins")

    known = _known_layers(architect)
    if architect.ecosystem.base is not None:
        target = known.get(id(architect.ecosystem.base), DEFAULT_NODE)
        graph.add_edge(ECOSYSTEM_NODE, target, relation="delegates")

    for index, unit in enumerate(architect.units):
        node = _unit_node(index, unit)
        kind = "unit" if unit.chained else "excluded"
        graph.add_node(
            node,
            kind=kind,
            path=unit.path,
            executed=unit.executed,
            color=SCOPE_COLORS[kind],
        )
        if not unit.chained:
            graph.add_edge(node, known.get(id(unit.environment), DEFAULT_NODE), relation="bound")
            continue
        base = unit.environment.base
        target = known.get(id(base))
        if target is None:
            target = f"ns_{id(base):x}"
            graph.add_node(target, kind="namespace", color=SCOPE_COLORS["default"])
        graph.add_edge(node, target, relation="delegates")

    return graph


def describe_environments(architect):
    """Print every recorded unit with the chain its lookups follow."""

    print(f"Repository: {architect.repository or '(none)'}")
    print(f"Ecosystem: {', '.join(sorted(map(str, architect.ecosystem))) or '(empty)'}")
    if not architect.units:
        print("  (no units loaded)")
    for unit in architect.units:
        state = "executed" if unit.executed else "not executed"
        print(f"  {unit.path} [{state}]")
        print(f"    lookup: {' → '.join(environment_layers(architect, unit))}")


def visualize_graph(architect, title="architect environments"):  # pragma: no cover
    """Render the environment graph with matplotlib."""

    if nx is None or plt is None:
        raise RuntimeError("Visualization requires networkx and matplotlib to be installed")

    graph = build_environment_graph(architect)
    positions = nx.spring_layout(graph, seed=42)
    colors = [graph.nodes[n].get("color", SCOPE_COLORS["default"]) for n in graph.nodes]
    dashed = [(u, v) for u, v, d in graph.edges(data=True) if d.get("relation") == "bound"]

    plt.figure()
    nx.draw(
        graph,
        positions,
        with_labels=True,
        node_color=colors,
        node_size=1400,
        font_size=8,
        arrows=True,
    )
    if dashed:
        nx.draw_networkx_edges(graph, positions, edgelist=dashed, style="dashed")
    plt.title(title)
    plt.tight_layout()
    plt.show()


def export_graphviz(architect, output_path):  # pragma: no cover
    """Export a Graphviz SVG of the environment chain."""

    if pydot is None:
        raise RuntimeError("Graphviz export requires the optional pydot dependency")

    graph = build_environment_graph(architect)
    dot = pydot.Dot(
        "architect_environments",
        graph_type="digraph",
        rankdir="LR",
        splines="spline",
        fontname="Helvetica",
    )

    for name, data in graph.nodes(data=True):
        label = data.get("path") or name
        if data.get("kind") in ("unit", "excluded"):
            label = f"{label}\\n[{'executed' if data.get('executed') else 'pending'}]"
        dot.add_node(
            pydot.Node(
                f'"{name}"',
                label=f'"{label}"',
                shape="box" if data.get("kind") in ("unit", "excluded") else "ellipse",
                style="filled",
                fillcolor=data.get("color", SCOPE_COLORS["default"]),
                color="#34495e",
                fontname="Helvetica",
            )
        )

    for src, dst, data in graph.edges(data=True):
        dot.add_edge(
            pydot.Edge(
                f'"{src}"',
                f'"{dst}"',
                label=data.get("relation", ""),
                style="dashed" if data.get("relation") == "bound" else "solid",
                color="#7f8c8d",
                arrowsize="0.8",
            )
        )

    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    dot.write_svg(str(output_path))
    print(f"  ✓ Graphviz visualization exported → {output_path}")


__all__ = [
    "build_environment_graph",
    "describe_environments",
    "environment_layers",
    "export_graphviz",
    "visualize_graph",
]
