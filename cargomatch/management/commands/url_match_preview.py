"""Preview URL matching and relation expansion against the dataset.

Usage::

    python manage.py url_match_preview https://www.acme.example/products
    python manage.py url_match_preview --examples --max-examples 10
    python manage.py url_match_preview https://www.amazon.com.au/dp/B0 --html saved-page.html
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Set

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from cargomatch.dataset import DatasetError, load_dataset
from cargomatch.engine.extract import page_context_from_html
from cargomatch.engine.index import match_by_page_context
from cargomatch.engine.relations import expand_related_entries
from cargomatch.engine.types import Entry, EntryKey, EntryMatch
from cargomatch.engine.url_matching import match_entries_by_url
from cargomatch.engine.urlnorm import safe_parse_url

SEED_COLUMNS = ('score', 'match_type', 'type', 'page_name', 'website', 'matched_path')
RELATION_COLUMNS = (
    'source',
    'type',
    'page_id',
    'page_name',
    'company',
    'product',
    'product_line',
    'website',
)


def example_urls(entries: Sequence[Entry], max_examples: int) -> List[str]:
    """Return the first ``max_examples`` distinct parseable websites, sorted."""

    urls = set()
    for entry in entries:
        parsed = safe_parse_url(entry.website)
        if parsed is not None:
            urls.add(parsed.geturl())
    return sorted(urls)[:max_examples]


def _cell(value) -> str:
    if value is None or value == '':
        return '-'
    return str(value)


def format_table(columns: Sequence[str], rows: Sequence[Sequence[object]]) -> str:
    cells = [[_cell(value) for value in row] for row in rows]
    widths = [len(column) for column in columns]
    for row in cells:
        widths = [max(width, len(value)) for width, value in zip(widths, row)]

    lines = ['  '.join(column.ljust(width) for column, width in zip(columns, widths))]
    lines.append('  '.join('-' * width for width in widths))
    for row in cells:
        lines.append('  '.join(value.ljust(width) for value, width in zip(row, widths)))
    return '\n'.join(lines)


def seed_rows(matches: Sequence[EntryMatch]) -> List[List[object]]:
    return [
        [
            match.score,
            match.match_type.value,
            match.entry.entity_type.value,
            match.entry.page_name,
            match.entry.website,
            match.matched_path,
        ]
        for match in matches
    ]


def relation_rows(expanded: Sequence[Entry], seed_keys: Set[EntryKey]) -> List[List[object]]:
    return [
        [
            'seed' if entry.key in seed_keys else 'related',
            entry.entity_type.value,
            entry.page_id,
            entry.page_name,
            entry.company,
            entry.product,
            entry.product_line,
            entry.website,
        ]
        for entry in expanded
    ]


class Command(BaseCommand):
    help = 'Show the URL seed matches for a URL and the related records they expand to.'

    def add_arguments(self, parser):
        parser.add_argument('url', nargs='?', help='URL to match. Omit to run dataset examples.')
        parser.add_argument(
            '--examples',
            action='store_true',
            help='Run the websites found in the dataset as examples.',
        )
        parser.add_argument('--limit', type=int, default=20, help='Maximum seed matches per URL.')
        parser.add_argument('--max-examples', type=int, default=25, help='Number of example URLs.')
        parser.add_argument(
            '--relations-limit',
            type=int,
            default=50,
            help='Maximum related rows printed per URL.',
        )
        parser.add_argument('--dataset', help='Dataset JSON file; defaults to CARGOMATCH_DATASET_PATH.')
        parser.add_argument(
            '--html',
            metavar='FILE',
            help='Saved HTML of the page at URL; matches its title and meta tags as the browser would.',
        )
        parser.add_argument(
            '--reload',
            action='store_true',
            help='Re-read CARGOMATCH_DATASET_PATH before matching.',
        )

    def handle(self, *args, **options):
        app_config = apps.get_app_config('cargomatch')
        entries = self._load_entries(app_config, options.get('dataset'), options['reload'])
        engine_config = app_config.engine_config

        if options.get('html'):
            if not options.get('url'):
                raise CommandError('--html needs the URL the page was saved from.')
            self._preview_page(
                entries, engine_config, options['url'], options['html'], options['relations_limit']
            )
            return

        run_examples = options['examples'] or not options.get('url')
        urls = example_urls(entries, options['max_examples']) if run_examples else [options['url']]

        if run_examples:
            self.stdout.write(f'Running {len(urls)} URL examples from dataset Website fields:')
            for url in urls:
                self.stdout.write(f'- {url}')
            self.stdout.write('')

        for url in urls:
            parsed = safe_parse_url(url)
            if parsed is None:
                self.stderr.write(f'Invalid URL: {url}')
                continue

            visited = parsed.geturl()
            matches = match_entries_by_url(entries, visited, options['limit'], engine_config)
            seeds = [match.entry for match in matches]
            expanded = expand_related_entries(entries, seeds)
            seed_keys = {entry.key for entry in seeds}

            self.stdout.write(f'Visited URL: {visited}')
            self.stdout.write(f'Seed matches: {len(matches)}')
            self.stdout.write(f'Expanded related entries: {len(expanded)}')
            self.stdout.write('')
            self.stdout.write('Seed Matches')
            self.stdout.write(format_table(SEED_COLUMNS, seed_rows(matches)))
            self.stdout.write('Related Expansion')
            self.stdout.write(
                format_table(RELATION_COLUMNS, relation_rows(expanded[: options['relations_limit']], seed_keys))
            )
            self.stdout.write('')

    def _preview_page(self, entries, engine_config, url, html_path, limit) -> None:
        try:
            html = Path(html_path).read_text(encoding='utf-8', errors='replace')
        except OSError as exc:
            raise CommandError(f'Cannot read {html_path}: {exc}') from exc

        context = page_context_from_html(url, html)
        matches = match_by_page_context(entries, context, engine_config)

        self.stdout.write(f'Page URL: {context.url}')
        self.stdout.write(f'Title: {context.title or "-"}')
        self.stdout.write(f'Page context matches: {len(matches)}')
        self.stdout.write('')
        rows = [row[1:] for row in relation_rows(matches[: limit], set())]
        self.stdout.write(format_table(RELATION_COLUMNS[1:], rows))

    def _load_entries(self, app_config, dataset_path, reload=False) -> Sequence[Entry]:
        if not dataset_path:
            if reload:
                return app_config.store.reload().entries
            return app_config.store.entries()
        try:
            return load_dataset(dataset_path)
        except DatasetError as exc:
            raise CommandError(str(exc)) from exc
