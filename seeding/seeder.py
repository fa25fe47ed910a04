"""
Sequential orchestrator: walks a generation roster one species at a time,
resolving, fetching and mapping each into an output record.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List

from upstream.chains import ChainCache
from upstream.core import GENERATIONS, REQUEST_DELAY_SECONDS, UPSTREAM_ERRORS
from upstream.forms import fetch_form_attributes
from upstream.roster import fetch_generation_roster
from upstream.species import resolve_species

from .evolution import find_node
from .records import build_record

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 10


@dataclass
class GenerationResult:
    generation: int
    records: List[dict] = field(default_factory=list)
    successes: int = 0
    failures: int = 0
    degraded: int = 0
    roster_size: int = 0
    roster_failed: bool = False


@dataclass
class RunResult:
    generations: List[GenerationResult] = field(default_factory=list)

    @property
    def records(self) -> List[dict]:
        out = []
        for g in self.generations:
            out.extend(g.records)
        return out

    @property
    def successes(self) -> int:
        return sum(g.successes for g in self.generations)

    @property
    def failures(self) -> int:
        return sum(g.failures for g in self.generations)


class PokedexSeeder:
    """Owns the HTTP session handle and the chain cache for one run."""

    def __init__(self, session=None, delay: float = REQUEST_DELAY_SECONDS):
        self.session = session
        self.delay = delay
        self.chains = ChainCache(session=session)

    def _pause(self):
        if self.delay > 0:
            time.sleep(self.delay)

    def seed_species(self, species_name: str, generation: int):
        """Return (record, degraded) for one species, or (None, False) when it is dropped."""
        resolved = resolve_species(species_name, session=self.session)
        self._pause()
        if resolved.degraded:
            logger.warning('Skipping %s: species could not be resolved (%s)', species_name, resolved.policy)
            return None, False

        degraded = False
        tree = None
        chain_depth = None
        if resolved.chain_reference:
            tree = self.chains.get(resolved.chain_reference)
            if tree is None:
                degraded = True
            else:
                chain_depth = self.chains.depth(resolved.chain_reference)
                if find_node(tree, species_name) is None:
                    logger.warning('%s not found in its evolution chain %s',
                                   species_name, resolved.chain_reference)
                    degraded = True
        else:
            logger.warning('Species %s has no evolution chain reference', species_name)
            degraded = True

        try:
            attrs = fetch_form_attributes(resolved.canonical_form_name, session=self.session)
            record = build_record(resolved, attrs, generation, tree=tree, chain_depth=chain_depth)
        except UPSTREAM_ERRORS as e:
            logger.warning('Error fetching %s (species: %s): %s',
                           resolved.canonical_form_name, species_name, e)
            return None, False
        return record, degraded

    def seed_roster(self, roster, generation: int) -> GenerationResult:
        result = GenerationResult(generation=generation, roster_size=len(roster))
        total = len(roster)
        for i, species_name in enumerate(roster):
            record, degraded = self.seed_species(species_name, generation)
            if record is None:
                result.failures += 1
            else:
                result.records.append(record)
                result.successes += 1
                if degraded:
                    result.degraded += 1

            if i < total - 1:
                self._pause()

            if (i + 1) % PROGRESS_EVERY == 0:
                logger.info('Gen %s progress: %d/%d processed', generation, i + 1, total)

        logger.info('Gen %s done: %d ok, %d errors, %d degraded',
                    generation, result.successes, result.failures, result.degraded)
        return result

    def seed_generation(self, generation: int) -> GenerationResult:
        logger.info('Processing generation %s...', generation)
        try:
            roster = fetch_generation_roster(generation, session=self.session)
        except UPSTREAM_ERRORS as e:
            logger.error('Error fetching generation %s roster: %s', generation, e)
            return GenerationResult(generation=generation, roster_failed=True)
        logger.info('Found %d species', len(roster))
        return self.seed_roster(roster, generation)

    def run(self, generations=GENERATIONS) -> RunResult:
        run = RunResult()
        for gen in generations:
            run.generations.append(self.seed_generation(gen))
        return run
