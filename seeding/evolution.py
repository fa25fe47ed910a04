"""
Evolution tree types and read-only navigation over them.

A lineage is a tree of EvolutionNode; every non-root node remembers the
transition details that lead into it. Traversals use an explicit stack so
pathological chain documents cannot exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .text_utils import same_name

TRIGGER_UNKNOWN = 'unknown'
LEVEL_TRIGGER = 'level-up'


@dataclass
class EvolutionNode:
    species_name: str
    species_url: str = ''
    # Raw upstream transition details for the edge into this node (empty for the root)
    transitions: Tuple[dict, ...] = ()
    children: List['EvolutionNode'] = field(default_factory=list)


@dataclass(frozen=True)
class EvolutionEdge:
    target: EvolutionNode
    trigger: str
    min_level: Optional[int] = None


def depth(tree: EvolutionNode) -> int:
    """Longest root-to-leaf path counted in nodes. A lone root has depth 1;
    branches contribute their maximum, never their sum.
    """
    best = 0
    stack = [(tree, 1)]
    while stack:
        node, d = stack.pop()
        if d > best:
            best = d
        for child in node.children:
            stack.append((child, d + 1))
    return best


def find_node(tree: EvolutionNode, species_name: str) -> Optional[EvolutionNode]:
    """Depth-first, pre-order search for a species, case-insensitive."""
    stack = [tree]
    while stack:
        node = stack.pop()
        if same_name(node.species_name, species_name):
            return node
        # Reversed so the first child is visited first
        stack.extend(reversed(node.children))
    return None


def edge_to(child: EvolutionNode) -> EvolutionEdge:
    # Only the first transition detail is kept when several are listed
    detail = child.transitions[0] if child.transitions else None
    if not detail:
        return EvolutionEdge(target=child, trigger=TRIGGER_UNKNOWN)
    trigger = (detail.get('trigger') or {}).get('name') or TRIGGER_UNKNOWN
    min_level = detail.get('min_level') if trigger == LEVEL_TRIGGER else None
    return EvolutionEdge(target=child, trigger=trigger, min_level=min_level)


def edges_of(node: EvolutionNode) -> List[EvolutionEdge]:
    return [edge_to(child) for child in node.children]
