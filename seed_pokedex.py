import argparse
import logging
import os
import sys
from pathlib import Path

import requests

from seeding.dataset import merge_and_save
from seeding.seeder import PokedexSeeder
from upstream.core import GENERATIONS, REQUEST_DELAY_SECONDS

logger = logging.getLogger('seed_pokedex')

# Output file; override with POKEDEX_OUTPUT or --output
DEFAULT_OUTPUT = Path(os.environ.get('POKEDEX_OUTPUT') or Path(__file__).resolve().parent / 'data' / 'pokedex.json')
USER_AGENT = 'pokedex-seeder/0.1 (+https://pokeapi.co)'


class SeedArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1, like an invalid generation selector."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f'{self.prog}: error: {message}\n')


def build_parser() -> argparse.ArgumentParser:
    parser = SeedArgumentParser(description='Seed pokedex.json from PokeAPI.')
    parser.add_argument('-g', '--gen', default=None,
                        help='Only process this generation (1-9); default is all generations')
    parser.add_argument('--output', default=None, help=f'Output JSON path (default: {DEFAULT_OUTPUT})')
    parser.add_argument('--delay-ms', type=float, default=None,
                        help='Pause between upstream calls in milliseconds')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def parse_generations(value):
    """None -> all generations; '3' -> [3]. Raises ValueError when out of range."""
    if value is None:
        return list(GENERATIONS)
    gen = int(str(value).strip())
    if gen not in GENERATIONS:
        raise ValueError(f'generation must be between {GENERATIONS[0]} and {GENERATIONS[-1]}')
    return [gen]


def main(argv=None, session=None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    try:
        generations = parse_generations(args.gen)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    output = Path(args.output) if args.output else DEFAULT_OUTPUT
    delay = args.delay_ms / 1000.0 if args.delay_ms is not None else REQUEST_DELAY_SECONDS

    if session is not None:
        return seed(session, generations, output, delay)
    with requests.Session() as session:
        session.headers['User-Agent'] = USER_AGENT
        return seed(session, generations, output, delay)


def seed(session, generations, output: Path, delay: float) -> int:
    if len(generations) == 1:
        logger.info('Processing only generation %s', generations[0])
    else:
        logger.info('Seeding all generations from PokeAPI')

    seeder = PokedexSeeder(session=session, delay=delay)
    run = seeder.run(generations)

    for g in run.generations:
        if g.roster_failed:
            logger.info('Gen %s: roster unavailable', g.generation)
        else:
            logger.info('Gen %s: %d/%d ok, %d errors (%d degraded)',
                        g.generation, g.successes, g.roster_size, g.failures, g.degraded)

    if len(generations) == 1 and run.generations[0].roster_failed:
        # Writing now would wipe the stored records of this generation
        logger.warning('Gen %s roster unavailable; leaving %s unchanged', generations[0], output)
        return 0

    try:
        merged = merge_and_save(output, run.records, generations)
    except OSError as e:
        logger.error('Fatal: could not write %s: %s', output, e)
        return 1

    logger.info('Records processed in this run: %d', len(run.records))
    logger.info('Total records in %s: %d', output, len(merged))
    return 0


if __name__ == '__main__':
    sys.exit(main())
