"""Django views exposing the matching engine as JSON endpoints.

``match_page`` replaces the extension's background message handler: it
receives the page context of a tab and answers with the relevant records,
the badge text and the grouped summary the popup displays.
``match_url`` is a diagnostic view showing raw URL seeds and their relation
expansion for a single URL.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from django.apps import apps
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .dataset import entry_to_record
from .engine.incidents import MatchSummary, badge_text, summarize_matches
from .engine.index import match_by_page_context
from .engine.relations import expand_related_entries
from .engine.types import Entry, EntryMatch
from .engine.url_matching import match_entries_by_url
from .forms import PageContextForm, UrlPreviewForm

logger = logging.getLogger(__name__)


def _app_config():
    return apps.get_app_config('cargomatch')


def _record(entry: Optional[Entry]) -> Optional[Dict[str, Any]]:
    return entry_to_record(entry) if entry is not None else None


def _serialize_summary(summary: MatchSummary) -> Dict[str, Any]:
    return {
        'top_match': _record(summary.top_match),
        'company_match': _record(summary.company_match),
        'incidents': [entry_to_record(item) for item in summary.incidents],
        'visible_incidents': [entry_to_record(item) for item in summary.visible_incidents],
        'products': [entry_to_record(item) for item in summary.products],
        'product_lines': [entry_to_record(item) for item in summary.product_lines],
        'hidden_related_count': summary.hidden_related_count,
    }


def _serialize_url_match(match: EntryMatch) -> Dict[str, Any]:
    return {
        'entry': entry_to_record(match.entry),
        'match_type': match.match_type.value,
        'matched_path': match.matched_path,
        'score': match.score,
        'reasons': list(match.reasons),
    }


@csrf_exempt
@require_POST
def match_page(request: HttpRequest) -> JsonResponse:
    """Return the records relevant to the posted page context."""

    try:
        payload = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({'detail': 'Request body must be valid JSON.'}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({'detail': 'Request body must be a JSON object.'}, status=400)

    form = PageContextForm.from_payload(payload)
    if not form.is_valid():
        return JsonResponse({'detail': 'Invalid page context.', 'errors': form.errors}, status=400)

    config = _app_config()
    context = form.to_page_context()
    matches = match_by_page_context(config.store.entries(), context, config.engine_config)
    logger.info('Matched %d record(s) for %s', len(matches), context.hostname)

    return JsonResponse(
        {
            'count': len(matches),
            'badge': badge_text(len(matches)),
            'matches': [entry_to_record(entry) for entry in matches],
            'summary': _serialize_summary(summarize_matches(matches, config.engine_config)),
        }
    )


@require_GET
def match_url(request: HttpRequest) -> JsonResponse:
    """Show the URL seed matches for ``?url=`` and the records they expand to."""

    form = UrlPreviewForm(request.GET)
    if not form.is_valid():
        return JsonResponse({'detail': 'Invalid query.', 'errors': form.errors}, status=400)

    config = _app_config()
    entries = config.store.entries()
    seeds = match_entries_by_url(
        entries,
        form.cleaned_data['url'],
        form.cleaned_data['limit'],
        config.engine_config,
    )
    seed_keys = {match.entry.key for match in seeds}
    expanded = expand_related_entries(entries, [match.entry for match in seeds])

    return JsonResponse(
        {
            'url': form.cleaned_data['url'],
            'seeds': [_serialize_url_match(match) for match in seeds],
            'related': [
                {
                    'source': 'seed' if entry.key in seed_keys else 'related',
                    'entry': entry_to_record(entry),
                }
                for entry in expanded
            ],
        }
    )
