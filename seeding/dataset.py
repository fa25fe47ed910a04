"""
Merge & persist for pokedex.json.

A full run replaces the file outright. A single-generation run drops every
stored record of that generation, adds the fresh ones and re-sorts, so other
generations come through untouched.
"""

import json
import logging
from pathlib import Path

from upstream.core import GENERATIONS

logger = logging.getLogger(__name__)


def species_sort_key(record: dict) -> int:
    return int(record['species_id'])


def sort_records(records):
    return sorted(records, key=species_sort_key)


def is_full_run(target_generations) -> bool:
    return set(target_generations) >= set(GENERATIONS)


def merge_records(existing, new_records, target_generations):
    """Fold a run's records into the stored dataset.
    Full run: existing data is discarded. Single generation: generation-scoped
    replace. Either way the result is sorted by numeric species id.
    """
    targets = set(target_generations)
    if is_full_run(targets):
        return sort_records(new_records)
    if len(targets) != 1:
        raise ValueError(f'Expected one generation or a full run, got {sorted(targets)}')
    kept = [r for r in existing if r.get('generation') not in targets]
    return sort_records(kept + list(new_records))


def load_dataset(path: Path):
    """Read the stored dataset; a missing or unreadable file counts as empty."""
    path = Path(path)
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        logger.warning('Could not read existing dataset %s, starting empty: %s', path, e)
        return []
    if not isinstance(data, list):
        logger.warning('Existing dataset %s is not a list, starting empty', path)
        return []
    return data


def save_dataset(path: Path, records) -> None:
    """Single whole-file write. OSError propagates (fatal for the run)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding='utf-8')


def merge_and_save(path: Path, new_records, target_generations):
    existing = [] if is_full_run(target_generations) else load_dataset(path)
    merged = merge_records(existing, new_records, target_generations)
    save_dataset(path, merged)
    logger.info('Wrote %d records to %s', len(merged), path)
    return merged
