"""Shared fixtures for matching engine tests."""

from __future__ import annotations

from typing import Any, List

import pytest

from cargomatch.engine.config import load_config
from cargomatch.engine.types import EntityType, Entry


@pytest.fixture()
def engine_config():
    """Provide the default engine configuration."""

    return load_config(None)


def make_entry(
    entity_type: EntityType,
    page_name: str,
    *,
    page_id: str | None = None,
    website: str | None = None,
    company: Any = None,
    product: Any = None,
    product_line: Any = None,
    status: Any = None,
    start_date: Any = None,
) -> Entry:
    return Entry(
        entity_type=entity_type,
        page_id=page_id if page_id is not None else page_name.lower().replace(" ", "-"),
        page_name=page_name,
        website=website,
        company=company,
        product=product,
        product_line=product_line,
        status=status,
        start_date=start_date,
    )


def acme_dataset() -> List[Entry]:
    return [
        make_entry(EntityType.COMPANY, "Acme", website="https://acme.com/"),
        make_entry(EntityType.PRODUCT_LINE, "Acme Home", company="Acme"),
        make_entry(EntityType.PRODUCT, "Acme Cam", company="Acme", product_line="Acme Home"),
        make_entry(
            EntityType.INCIDENT,
            "Acme Breach 2025",
            company="Acme",
            product="Acme Cam",
            product_line="Acme Home",
        ),
        make_entry(EntityType.COMPANY, "OtherCorp", website="https://othercorp.com/"),
    ]


@pytest.fixture()
def relation_fixture() -> List[Entry]:
    """Acme company tree plus one unrelated company."""

    return acme_dataset()
