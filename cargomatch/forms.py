"""Forms validating requests to the cargomatch JSON endpoints.

The browser extension posts a JSON page context; the view flattens it into
form data so that Django's validation rules apply just as they would for a
regular form submission.
"""

from __future__ import annotations

from typing import Any, Dict

from django import forms

from .engine.types import PageContext
from .engine.urlnorm import safe_parse_url

# Form field name -> key of the ``meta`` mapping in the request payload
META_FIELD_MAP = {
    'meta_description': 'description',
    'meta_title': 'title',
    'og_title': 'og:title',
    'og_description': 'og:description',
}


def _validate_page_url(value: str) -> None:
    if safe_parse_url(value) is None:
        raise forms.ValidationError('Enter a URL with a valid hostname.')


class PageContextForm(forms.Form):
    """Validate the page context reported for the current tab."""

    url = forms.CharField(max_length=4096, validators=[_validate_page_url])
    hostname = forms.CharField(max_length=255, required=False)
    title = forms.CharField(max_length=2048, required=False, strip=True)
    meta_description = forms.CharField(max_length=4096, required=False)
    meta_title = forms.CharField(max_length=2048, required=False)
    og_title = forms.CharField(max_length=2048, required=False)
    og_description = forms.CharField(max_length=4096, required=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'PageContextForm':
        """Build a bound form from the extension's JSON payload."""

        meta = payload.get('meta') if isinstance(payload.get('meta'), dict) else {}
        data = {
            'url': payload.get('url') or '',
            'hostname': payload.get('hostname') or '',
            'title': payload.get('title') or '',
        }
        for field_name, meta_key in META_FIELD_MAP.items():
            value = meta.get(meta_key)
            data[field_name] = value if isinstance(value, str) else ''
        return cls(data)

    def clean_hostname(self) -> str:
        return self.cleaned_data['hostname'].strip().lower()

    def to_page_context(self) -> PageContext:
        cleaned = self.cleaned_data
        hostname = cleaned['hostname']
        if not hostname:
            parsed = safe_parse_url(cleaned['url'])
            hostname = (parsed.hostname or '') if parsed else ''
        meta = {
            meta_key: cleaned[field_name]
            for field_name, meta_key in META_FIELD_MAP.items()
            if cleaned.get(field_name)
        }
        return PageContext(
            url=cleaned['url'],
            hostname=hostname,
            title=cleaned.get('title') or None,
            meta=meta,
        )


class UrlPreviewForm(forms.Form):
    """Query parameters for the raw URL match preview."""

    url = forms.CharField(max_length=4096, validators=[_validate_page_url])
    limit = forms.IntegerField(
        min_value=1,
        max_value=50,
        required=False,
        help_text='Maximum number of seed URL matches (default 20).',
    )

    def clean_limit(self) -> int:
        return self.cleaned_data.get('limit') or 20
