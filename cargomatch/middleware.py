from __future__ import annotations

import math
import time
from typing import Callable, List

from django.conf import settings
from django.core.cache import caches
from django.http import HttpRequest, HttpResponse, JsonResponse

DEFAULT_THROTTLE_LIMIT = 120  # requests
DEFAULT_THROTTLE_WINDOW = 60  # seconds
DEFAULT_THROTTLE_KEY_PREFIX = 'cargomatch:throttle'
DEFAULT_THROTTLED_ROUTES = ('cargomatch:match_page', 'cargomatch:match_url')


class MatchRateThrottle:
    """Sliding-window rate limit on the match endpoints, per client IP and route.

    Request timestamps live in the configured cache; a request arriving when
    ``limit`` timestamps already fall inside the window is answered with 429.
    """

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
        *,
        limit: int | None = None,
        window: int | None = None,
        cache_alias: str = 'default',
        key_prefix: str | None = None,
    ) -> None:
        self.get_response = get_response
        self.limit = limit or getattr(settings, 'THROTTLE_LIMIT', DEFAULT_THROTTLE_LIMIT)
        self.window = window or getattr(settings, 'THROTTLE_WINDOW', DEFAULT_THROTTLE_WINDOW)
        self.cache = caches[cache_alias]
        self.key_prefix = key_prefix or getattr(settings, 'THROTTLE_KEY_PREFIX', DEFAULT_THROTTLE_KEY_PREFIX)

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_view(self, request: HttpRequest, view_func, view_args, view_kwargs) -> HttpResponse | None:
        # resolver_match is only populated once URL resolution ran
        resolved = getattr(request, 'resolver_match', None)
        if resolved is None:
            return None

        route_name = resolved.view_name
        if route_name not in getattr(settings, 'THROTTLED_ROUTES', DEFAULT_THROTTLED_ROUTES):
            return None

        cache_key = self._build_cache_key(request, route_name)
        now = time.time()
        bucket: List[float] = [
            timestamp for timestamp in self.cache.get(cache_key, []) if timestamp > now - self.window
        ]

        if len(bucket) >= self.limit:
            retry_after = max(1, math.ceil(bucket[0] + self.window - now))
            return self._reject(route_name, retry_after)

        bucket.append(now)
        self.cache.set(cache_key, bucket, timeout=self.window)
        return None

    def _build_cache_key(self, request: HttpRequest, route_name: str) -> str:
        return f"{self.key_prefix}:{route_name}:{self._get_client_ip(request)}"

    def _get_client_ip(self, request: HttpRequest) -> str:
        header = getattr(settings, 'THROTTLE_IP_HEADER', 'HTTP_X_FORWARDED_FOR')
        value = request.META.get(header)
        if value:
            return value.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '0.0.0.0')

    def _reject(self, route_name: str, retry_after: int) -> HttpResponse:
        response = JsonResponse(
            {
                'detail': 'Rate limit exceeded. Try again shortly.',
                'route': route_name,
            },
            status=429,
        )
        response['Retry-After'] = str(retry_after)
        return response
