# tenantcms/repositories/catalog.py
# Orderable catalogue entities; keys are the URL slugs exposed by the API
from __future__ import annotations

from tenantcms.core.errors import NotFound
from tenantcms.models.catalog import Faq, MenuItem, Service, TeamMember, Testimonial
from tenantcms.repositories.base import Repository

services: Repository[Service] = Repository(
    Service, searchable=("name", "description", "headline", "slug"), default_sort="order,name"
)
testimonials: Repository[Testimonial] = Repository(
    Testimonial, searchable=("author_name", "author_title", "content"), default_sort="order"
)
faqs: Repository[Faq] = Repository(
    Faq, searchable=("question", "answer", "category"), default_sort="order"
)
team_members: Repository[TeamMember] = Repository(
    TeamMember, searchable=("name", "title", "bio"), default_sort="order,name"
)
menu_items: Repository[MenuItem] = Repository(
    MenuItem, searchable=("label", "url"), default_sort="order"
)

CATALOG: dict[str, Repository] = {
    "services": services,
    "testimonials": testimonials,
    "faqs": faqs,
    "team-members": team_members,
    "menu-items": menu_items,
}


def get_catalog_repository(entity: str) -> Repository:
    repo = CATALOG.get(entity)
    if repo is None:
        raise NotFound(f"Unknown entity '{entity}'")
    return repo
