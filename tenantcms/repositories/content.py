# tenantcms/repositories/content.py
from __future__ import annotations

from tenantcms.models.content import ComponentType, Page, Section
from tenantcms.repositories.base import Repository

component_types: Repository[ComponentType] = Repository(
    ComponentType,
    searchable=("name", "slug", "description"),
    default_sort="order,name",
)

pages: Repository[Page] = Repository(
    Page,
    searchable=("title", "slug", "meta_title"),
    default_sort="title",
)

sections: Repository[Section] = Repository(
    Section,
    searchable=("component_type",),
    default_sort="order",
)
