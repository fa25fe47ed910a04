"""
Shared fixtures: a fake requests session keyed by URL and PokeAPI payload builders.
"""
import sys
from pathlib import Path

import pytest
import requests

# Ensure project root is importable
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from upstream.core import POKEAPI_BASE  # noqa: E402


class FakeResponse:
    def __init__(self, url, payload=None, status_code=200):
        self.url = url
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} for url: {self.url}', response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Serves canned JSON per URL; unknown URLs answer 404. Records every GET."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def add(self, url, payload=None, status_code=200):
        self.routes[url] = (payload, status_code)

    def get(self, url, timeout=None):
        self.calls.append(url)
        if url not in self.routes:
            return FakeResponse(url, None, 404)
        payload, status = self.routes[url]
        if isinstance(payload, requests.RequestException):
            raise payload
        return FakeResponse(url, payload, status)

    def count(self, url):
        return self.calls.count(url)


def species_url(sid):
    return f'{POKEAPI_BASE}/pokemon-species/{sid}/'


def chain_url(cid):
    return f'{POKEAPI_BASE}/evolution-chain/{cid}/'


def link(name, sid, children=(), details=None):
    """One evolves_to link of an /evolution-chain document."""
    return {
        'species': {'name': name, 'url': species_url(sid)},
        'evolution_details': details if details is not None else [],
        'evolves_to': list(children),
    }


def level_detail(level):
    return {'min_level': level, 'trigger': {'name': 'level-up', 'url': ''}, 'item': None}


def species_doc(name, sid, chain=None, varieties=None):
    if varieties is None:
        varieties = [{'is_default': True, 'pokemon': {'name': name, 'url': ''}}]
    doc = {'id': sid, 'name': name, 'varieties': varieties}
    if chain:
        doc['evolution_chain'] = {'url': chain}
    return doc


def pokemon_doc(name, pid, types=('grass',), moves=(), stats=None):
    if stats is None:
        stats = {'hp': 45, 'attack': 49, 'defense': 49,
                 'special-attack': 65, 'special-defense': 65, 'speed': 45}
    return {
        'id': pid,
        'name': name,
        'types': [{'slot': i + 1, 'type': {'name': t}} for i, t in enumerate(types)],
        'stats': [{'base_stat': v, 'stat': {'name': k}} for k, v in stats.items()],
        'moves': [
            {
                'move': {'name': mv},
                'version_group_details': [{
                    'level_learned_at': 1,
                    'move_learn_method': {'name': method},
                    'version_group': {'name': 'red-blue'},
                }],
            }
            for mv, method in moves
        ],
    }


BULBASAUR_CHAIN = {
    'id': 1,
    'chain': link('bulbasaur', 1, [
        link('ivysaur', 2, [
            link('venusaur', 3, details=[level_detail(32)]),
        ], details=[level_detail(16)]),
    ]),
}


def add_species(session, name, sid, chain=None, types=('grass',), moves=(), varieties=None):
    session.add(f'{POKEAPI_BASE}/pokemon-species/{name}', species_doc(name, sid, chain, varieties))
    session.add(f'{POKEAPI_BASE}/pokemon/{name}', pokemon_doc(name, sid, types, moves))


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def bulbasaur_line(session):
    """Session serving gen 1 with the three-stage bulbasaur line."""
    session.add(f'{POKEAPI_BASE}/generation/1', {'pokemon_species': [
        {'name': 'bulbasaur', 'url': species_url(1)},
        {'name': 'ivysaur', 'url': species_url(2)},
        {'name': 'venusaur', 'url': species_url(3)},
    ]})
    session.add(chain_url(1), BULBASAUR_CHAIN)
    for name, sid in (('bulbasaur', 1), ('ivysaur', 2), ('venusaur', 3)):
        add_species(session, name, sid, chain=chain_url(1), types=('grass', 'poison'),
                    moves=[('tackle', 'level-up'), ('vine-whip', 'level-up'), ('cut', 'machine')])
    return session
