from django.apps import AppConfig
from django.conf import settings


class CargomatchConfig(AppConfig):
    """Configuration for the cargomatch Django app.

    Owns the process-wide dataset snapshot and engine configuration that the
    views hand to the matching engine on every request.
    """

    name = 'cargomatch'

    def ready(self) -> None:
        from .dataset import DatasetStore
        from .engine.config import load_config

        self.store = DatasetStore(getattr(settings, 'CARGOMATCH_DATASET_PATH', None))
        self.engine_config = load_config(getattr(settings, 'CARGOMATCH_CONFIG_PATH', None))
