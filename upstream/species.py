import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .core import POKEAPI_BASE, UPSTREAM_ERRORS, fetch_json

logger = logging.getLogger(__name__)

# Which rule picked the canonical form
FALLBACK_DEFAULT = 'default'                    # variety flagged is_default
FALLBACK_FIRST_VARIETY = 'first-variety'        # no default flag, first listed variety
FALLBACK_INPUT_NAME = 'input-name'              # species has no varieties at all
FALLBACK_SPECIES_UNAVAILABLE = 'species-unavailable'  # species fetch failed

DEGRADED_POLICIES = {FALLBACK_INPUT_NAME, FALLBACK_SPECIES_UNAVAILABLE}


@dataclass
class ResolvedSpecies:
    """Canonical playable form of a species plus its lineage locator."""
    species_name: str
    canonical_form_name: str
    chain_reference: Optional[str] = None
    variety_names: List[str] = field(default_factory=list)
    policy: str = FALLBACK_DEFAULT

    @property
    def degraded(self) -> bool:
        return self.policy in DEGRADED_POLICIES


def select_canonical_form(species_name: str, varieties):
    """Pick the default variety, else the first listed one, else the input name.
    Returns (form_name, policy).
    """
    names = []
    default_name = None
    for v in varieties or []:
        nm = (v.get('pokemon') or {}).get('name')
        if not nm:
            continue
        names.append(nm)
        if default_name is None and v.get('is_default'):
            default_name = nm
    if default_name:
        return default_name, FALLBACK_DEFAULT
    if names:
        return names[0], FALLBACK_FIRST_VARIETY
    return species_name, FALLBACK_INPUT_NAME


def resolve_species(species_name: str, session=None) -> ResolvedSpecies:
    """Resolve a species reference name to its canonical form and chain reference.
    Never raises for upstream problems: a failed fetch or a malformed body
    yields a degraded result carrying the input name and no chain reference.
    """
    try:
        j = fetch_json(f'{POKEAPI_BASE}/pokemon-species/{species_name}', session=session)
        return _resolved_from_doc(species_name, j)
    except UPSTREAM_ERRORS as e:
        logger.warning('Could not resolve species %s: %s', species_name, e)
        return ResolvedSpecies(
            species_name=species_name,
            canonical_form_name=species_name,
            policy=FALLBACK_SPECIES_UNAVAILABLE,
        )


def _resolved_from_doc(species_name: str, j: dict) -> ResolvedSpecies:
    varieties = j.get('varieties') or []
    form_name, policy = select_canonical_form(species_name, varieties)
    if policy == FALLBACK_INPUT_NAME:
        logger.warning('Species %s lists no varieties; using input name', species_name)
        return ResolvedSpecies(species_name=species_name, canonical_form_name=form_name, policy=policy)
    if policy == FALLBACK_FIRST_VARIETY:
        logger.warning('Species %s has no default variety; using %s', species_name, form_name)

    chain_ref = (j.get('evolution_chain') or {}).get('url') or None
    variety_names = [(v.get('pokemon') or {}).get('name') for v in varieties]
    return ResolvedSpecies(
        species_name=species_name,
        canonical_form_name=form_name,
        chain_reference=chain_ref,
        variety_names=[nm for nm in variety_names if nm],
        policy=policy,
    )
