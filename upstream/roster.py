import logging

from .core import POKEAPI_BASE, GENERATIONS, fetch_json

logger = logging.getLogger(__name__)


def fetch_generation_roster(gen: int, session=None):
    """Return the species reference names of a generation, in API order.
    Upstream errors propagate to the caller; malformed entries are skipped.
    """
    if gen not in GENERATIONS:
        raise ValueError(f'Unsupported generation: {gen}')
    j = fetch_json(f'{POKEAPI_BASE}/generation/{gen}', session=session)
    names = []
    for entry in j.get('pokemon_species') or []:
        if not isinstance(entry, dict):
            logger.warning('Generation %s roster: skipping malformed entry %r', gen, entry)
            continue
        name = entry.get('name')
        if name:
            names.append(name)
    logger.debug('Generation %s roster: %d species', gen, len(names))
    return names
