import logging
import os
import re

import requests

logger = logging.getLogger(__name__)

# Constants
POKEAPI_BASE = os.environ.get('POKEAPI_BASE') or 'https://pokeapi.co/api/v2'
REQUEST_TIMEOUT = float(os.environ.get('POKEAPI_TIMEOUT') or 10)
# Fixed pause between upstream calls (PokeAPI asks clients to be polite)
REQUEST_DELAY_SECONDS = float(os.environ.get('SEED_REQUEST_DELAY_MS') or 75) / 1000.0

# Supported generations, inclusive
GENERATIONS = range(1, 10)

# Everything that counts as "the upstream call failed" for one item:
# transport errors, HTTP errors, undecodable bodies and wrong-shaped bodies.
UPSTREAM_ERRORS = (requests.RequestException, ValueError, KeyError, TypeError, AttributeError)

_SPECIES_URL_ID = re.compile(r'pokemon-species/(\d+)')


def fetch_json(url: str, session=None, timeout: float = REQUEST_TIMEOUT):
    """GET a PokeAPI document and return the decoded body.
    Raises on non-2xx responses; no retries.
    """
    http = session or requests
    logger.debug('GET %s', url)
    r = http.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()


def species_id_from_url(url: str):
    m = _SPECIES_URL_ID.search(url or '')
    return int(m.group(1)) if m else None


def pad_species_id(num) -> str:
    return str(num).zfill(3)
