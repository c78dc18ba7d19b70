"""Group-level connectivity of the board.

The board graph has one node per group and an edge wherever two groups share
a cardinal tile edge. A group may be picked up only if the remaining groups
still form a single component.
"""

from __future__ import annotations

from collections import deque

import networkx as nx

from shiftboard.domain.registry import TileRegistry


def can_remove_group(registry: TileRegistry, group_id: int) -> bool:
    """True if removing ``group_id`` leaves every other group mutually reachable.

    Breadth-first search over the cached adjacency, seeded from a neighbour of
    the removed group, O(groups + adjacency edges).
    """
    if group_id not in registry.groups:
        raise KeyError(group_id)
    total = registry.group_count
    if total <= 1:
        return True

    neighbors = registry.groups_adjacent_to(group_id)
    if neighbors:
        start = neighbors[0]
    else:
        # Already floating; the rest may still be connected without it.
        start = next(g for g in registry.groups if g != group_id)

    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in registry.adjacency[current]:
            if neighbor == group_id or neighbor in visited:
                continue
            visited.add(neighbor)
            queue.append(neighbor)
    return len(visited) == total - 1


def group_adjacency_graph(registry: TileRegistry) -> nx.Graph:
    """Build the group adjacency graph; node attribute ``size`` is the tile count."""
    graph = nx.Graph()
    for group_id, group in registry.groups.items():
        graph.add_node(group_id, size=len(group))
    for group_id, neighbors in registry.adjacency.items():
        for neighbor in neighbors:
            if group_id < neighbor:
                graph.add_edge(group_id, neighbor)
    return graph


def board_is_fully_connected(registry: TileRegistry) -> bool:
    """True if every group is reachable from every other group."""
    if registry.group_count <= 1:
        return True
    return nx.is_connected(group_adjacency_graph(registry))


def removable_groups(registry: TileRegistry) -> set[int]:
    """Groups that may be selected: every group that is not a cut vertex."""
    if registry.group_count <= 1:
        return set(registry.groups)
    graph = group_adjacency_graph(registry)
    if not nx.is_connected(graph):
        return {g for g in registry.groups if can_remove_group(registry, g)}
    return set(graph.nodes) - set(nx.articulation_points(graph))
