"""Module-level cycle search.

``Module.get_cyclic_dependencies`` re-explores the graph from every root.
Only modules inside a non-trivial strongly connected component can close a
cycle back on themselves, so the SCC pass below skips the rest without
changing the per-root output.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple

from ..logging_config import get_logger
from .modules import Module

logger = get_logger(__name__)


def build_module_graph(modules: Iterable[Module]) -> Dict[str, List[str]]:
    """Adjacency of module names over dependency modules."""
    return {
        module.name: [dependency.name for dependency in module.get_dependency_modules()]
        for module in modules
    }


def tarjan_scc(adjacency: Dict[str, List[str]], all_nodes: Iterable[str]) -> Iterator[set[str]]:
    """Yield strongly connected components, sinks first.

    Components come out as soon as Tarjan's algorithm closes them, so a
    caller can stop early. Edges to names outside ``all_nodes`` are ignored.
    The walk keeps its own stack of (node, pending successors) frames; a
    dependency chain longer than the recursion limit is fine.
    """
    nodes = list(dict.fromkeys(all_nodes))
    known = set(nodes)
    order: Dict[str, int] = {}
    low: Dict[str, int] = {}
    open_nodes: List[str] = []
    open_set: set[str] = set()

    def enter(node: str) -> Tuple[str, Iterator[str]]:
        order[node] = low[node] = len(order)
        open_nodes.append(node)
        open_set.add(node)
        return node, (s for s in adjacency.get(node, ()) if s in known)

    for start in nodes:
        if start in order:
            continue
        frames = [enter(start)]
        while frames:
            node, successors = frames[-1]
            successor = next(successors, None)
            if successor is not None:
                if successor not in order:
                    frames.append(enter(successor))
                elif successor in open_set:
                    low[node] = min(low[node], order[successor])
                continue

            frames.pop()
            if frames:
                parent = frames[-1][0]
                low[parent] = min(low[parent], low[node])
            if low[node] != order[node]:
                continue
            component: set[str] = set()
            member = None
            while member != node:
                member = open_nodes.pop()
                open_set.discard(member)
                component.add(member)
            yield component


def find_cyclic_dependencies(modules: Iterable[Module]) -> Dict[str, List[List[Module]]]:
    """Cycles per root module, for every module that takes part in one.

    Returns:
        Mapping of module name to the cycles rooted at it (modules not in any
        cycle are absent)
    """
    modules = list(modules)
    adjacency = build_module_graph(modules)
    cyclic_names: set[str] = set()
    for component in tarjan_scc(adjacency, adjacency.keys()):
        if len(component) > 1:
            cyclic_names |= component

    cycles: Dict[str, List[List[Module]]] = {}
    for module in modules:
        if module.name not in cyclic_names:
            continue
        found = module.get_cyclic_dependencies()
        if found:
            cycles[module.name] = found
    logger.debug(f"{len(cyclic_names)} modules in dependency cycles")
    return cycles
