import logging

from seeding.evolution import EvolutionNode, depth

from .core import UPSTREAM_ERRORS, fetch_json

logger = logging.getLogger(__name__)


def parse_chain(chain_json: dict) -> EvolutionNode:
    """Build an EvolutionNode tree from an /evolution-chain document."""
    root_link = chain_json['chain']
    root = _node_from_link(root_link)
    stack = [(root_link, root)]
    while stack:
        link, node = stack.pop()
        for child_link in link.get('evolves_to') or []:
            child = _node_from_link(child_link)
            node.children.append(child)
            stack.append((child_link, child))
    return root


def _node_from_link(link: dict) -> EvolutionNode:
    species = link['species']
    return EvolutionNode(
        species_name=species['name'],
        species_url=species.get('url') or '',
        transitions=tuple(link.get('evolution_details') or ()),
    )


class ChainCache:
    """Per-run memo of evolution chains keyed by chain reference (the chain URL).

    Each distinct reference is fetched at most once, whether the fetch succeeds
    or not; a failed reference is remembered as an unknown lineage.
    """

    def __init__(self, session=None):
        self._session = session
        self._trees = {}   # reference -> EvolutionNode or None
        self._depths = {}  # reference -> int
        self.fetch_count = 0

    def __contains__(self, reference) -> bool:
        return reference in self._trees

    def get(self, reference):
        """Return the lineage tree for a reference, or None if it is unknown."""
        if not reference:
            return None
        if reference in self._trees:
            logger.debug('Chain cache hit: %s', reference)
            return self._trees[reference]
        logger.debug('Chain cache miss: %s', reference)
        self.fetch_count += 1
        try:
            tree = parse_chain(fetch_json(reference, session=self._session))
        except UPSTREAM_ERRORS as e:
            logger.warning('Error fetching evolution chain %s: %s', reference, e)
            self._trees[reference] = None
            return None
        self._trees[reference] = tree
        self._depths[reference] = depth(tree)
        return tree

    def depth(self, reference):
        """Maximum depth of a cached lineage; fetches on miss. None if unknown."""
        if self.get(reference) is None:
            return None
        return self._depths[reference]
