"""
Record mapping: turns a resolved species, its form attributes and its lineage
into the flat dict persisted in pokedex.json (snake_case keys read by the
battle engine).
"""

from upstream.core import pad_species_id, species_id_from_url

from .evolution import edges_of, find_node
from .text_utils import display_name, same_name

UNKNOWN_TYPE = 'Unknown'
LEVEL_UP_METHOD = 'level-up'
STARTER_MIN_DEPTH = 3

TYPE_MAP = {
    'normal': 'Normal',
    'fire': 'Fire',
    'water': 'Water',
    'grass': 'Grass',
    'electric': 'Electric',
    'ice': 'Ice',
    'fighting': 'Fighting',
    'poison': 'Poison',
    'ground': 'Ground',
    'flying': 'Flying',
    'psychic': 'Psychic',
    'bug': 'Bug',
    'rock': 'Rock',
    'ghost': 'Ghost',
    'dragon': 'Dragon',
    'dark': 'Dark',
    'steel': 'Steel',
    'fairy': 'Fairy',
}

# PokeAPI stat name -> output key
STAT_MAP = {
    'hp': 'hp',
    'attack': 'attack',
    'defense': 'defense',
    'special-attack': 'special_attack',
    'special-defense': 'special_defense',
    'speed': 'speed',
}


def map_type(api_type: str) -> str:
    return TYPE_MAP.get((api_type or '').lower(), UNKNOWN_TYPE)


def map_types(type_slots):
    """Return (primary, secondary) from the two lowest-numbered type slots."""
    ordered = sorted(type_slots or [], key=lambda t: t.get('slot', 99))
    names = [map_type((t.get('type') or {}).get('name')) for t in ordered[:2]]
    if not names:
        return UNKNOWN_TYPE, None
    return names[0], (names[1] if len(names) > 1 else None)


def map_stats(api_stats):
    """Six named base stats; anything missing upstream is 0."""
    stats = {key: 0 for key in STAT_MAP.values()}
    for entry in api_stats or []:
        key = STAT_MAP.get((entry.get('stat') or {}).get('name'))
        if key:
            stats[key] = int(entry.get('base_stat') or 0)
    return stats


def extract_level_up_moves(moves):
    """Sorted, de-duplicated names of moves learnt by level-up in any version group."""
    pool = set()
    for move_data in moves or []:
        name = (move_data.get('move') or {}).get('name')
        if not name:
            continue
        for detail in move_data.get('version_group_details') or []:
            if (detail.get('move_learn_method') or {}).get('name') == LEVEL_UP_METHOD:
                pool.add(name)
                break
    return sorted(pool)


def is_starter_candidate(tree, chain_depth, species_name: str) -> bool:
    """Only the root of a lineage with at least three stages qualifies."""
    if tree is None or chain_depth is None:
        return False
    return chain_depth >= STARTER_MIN_DEPTH and same_name(tree.species_name, species_name)


def target_species_id(node) -> str:
    sid = species_id_from_url(node.species_url)
    if sid is None:
        return node.species_name
    return pad_species_id(sid)


def map_evolutions(edges):
    return [
        {
            'target_species_id': target_species_id(edge.target),
            'min_level': edge.min_level,
            'trigger': edge.trigger,
        }
        for edge in edges
    ]


def lineage_fields(tree, chain_depth, species_name: str):
    """(is_starter_candidate, evolutions) for a species; unknown lineage -> (False, [])."""
    if tree is None:
        return False, []
    node = find_node(tree, species_name)
    evolutions = map_evolutions(edges_of(node)) if node is not None else []
    return is_starter_candidate(tree, chain_depth, species_name), evolutions


def build_record(resolved, attrs, generation: int, tree=None, chain_depth=None):
    primary, secondary = map_types(attrs.types)
    starter, evolutions = lineage_fields(tree, chain_depth, resolved.species_name)
    return {
        'species_id': pad_species_id(attrs.form_id),
        'display_name': display_name(resolved.species_name),
        'generation': generation,
        'primary_type': primary,
        'secondary_type': secondary,
        'base_stats': map_stats(attrs.stats),
        'move_pool': extract_level_up_moves(attrs.moves),
        'is_starter_candidate': starter,
        'evolutions': evolutions,
    }
