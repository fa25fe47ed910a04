import logging
from dataclasses import dataclass, field
from typing import List

from .core import POKEAPI_BASE, fetch_json

logger = logging.getLogger(__name__)


@dataclass
class FormAttributes:
    """Raw typing, stats and moves of one playable form, as reported upstream."""
    form_id: int
    form_name: str
    types: List[dict] = field(default_factory=list)
    stats: List[dict] = field(default_factory=list)
    moves: List[dict] = field(default_factory=list)


def fetch_form_attributes(form_name: str, session=None) -> FormAttributes:
    """Fetch /pokemon/<form_name>. Upstream errors propagate; the caller drops the species."""
    j = fetch_json(f'{POKEAPI_BASE}/pokemon/{form_name}', session=session)
    return FormAttributes(
        form_id=int(j['id']),
        form_name=j.get('name') or form_name,
        types=list(j.get('types') or []),
        stats=list(j.get('stats') or []),
        moves=list(j.get('moves') or []),
    )
