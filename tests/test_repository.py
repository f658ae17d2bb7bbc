# tests/test_repository.py
from __future__ import annotations

import pytest

from tenantcms.core.errors import InvalidArgument, NotFound
from tenantcms.models.catalog import Faq, Service
from tenantcms.repositories.base import transaction
from tenantcms.repositories.catalog import faqs, get_catalog_repository, services
from tenantcms.repositories.content import component_types
from tenantcms.services import component_registry


def _services(db, tenant, rows):
    out = []
    for i, (name, published) in enumerate(rows):
        s = Service(tenant_id=tenant.id, name=name, slug=name.lower().replace(" ", "-"), is_published=published, order=i)
        db.add(s)
        out.append(s)
    db.flush()
    return out


@pytest.fixture()
def catalogue(db, tenant_a, tenant_b):
    a = _services(db, tenant_a, [
        ("Web Design", True), ("Branding", False), ("SEO Audit", True), ("Web Hosting", True), ("Copywriting", False),
    ])
    _services(db, tenant_b, [("Web Design", True), ("Plumbing", True)])
    db.commit()
    return a


def test_paginate_filters_by_equality_and_in_list(db, ctx_a, catalogue):
    published = services.paginate(db, ctx_a.tenant_only(), filters={"is_published": True})
    assert published.total == 3
    assert all(s.tenant_id == ctx_a.tenant_id for s in published.items)

    wanted = [catalogue[1].id, catalogue[4].id]
    picked = services.paginate(db, ctx_a.tenant_only(), filters={"id": wanted})
    assert sorted(s.id for s in picked.items) == sorted(wanted)

    # None filters are ignored
    assert services.paginate(db, ctx_a.tenant_only(), filters={"is_published": None}).total == 5


def test_paginate_search_and_sort(db, ctx_a, catalogue):
    result = services.paginate(db, ctx_a.tenant_only(), search="web", sort="-name")
    assert [s.name for s in result.items] == ["Web Hosting", "Web Design"]

    # default sort is order,name
    assert [s.name for s in services.list_all(db, ctx_a.tenant_only())] == [
        "Web Design", "Branding", "SEO Audit", "Web Hosting", "Copywriting",
    ]


def test_paginate_window_and_metadata(db, ctx_a, catalogue):
    second = services.paginate(db, ctx_a.tenant_only(), page=2, per_page=2)
    assert second.total == 5
    assert second.pages == 3
    assert [s.order for s in second.items] == [2, 3]

    beyond = services.paginate(db, ctx_a.tenant_only(), page=9, per_page=2)
    assert beyond.items == []
    assert beyond.total == 5

    with pytest.raises(InvalidArgument):
        services.paginate(db, ctx_a.tenant_only(), page=0)


def test_per_page_is_clamped(db, ctx_a, catalogue, monkeypatch):
    from tenantcms.core.settings import settings
    monkeypatch.setattr(settings, "MAX_PER_PAGE", 2)
    assert services.paginate(db, ctx_a.tenant_only(), per_page=500).per_page == 2


@pytest.mark.parametrize("kwargs", [
    {"filters": {"password": "x"}},
    {"sort": "nonexistent"},
    {"sort": "-tenant_name"},
])
def test_unknown_columns_are_rejected(db, ctx_a, catalogue, kwargs):
    with pytest.raises(InvalidArgument):
        services.paginate(db, ctx_a.tenant_only(), **kwargs)


def test_count_and_exists_are_scoped(db, ctx_a, ctx_b, catalogue):
    assert services.count(db, ctx_a.tenant_only()) == 5
    assert services.count(db, ctx_b.tenant_only()) == 2
    assert services.exists(db, ctx_b.tenant_only(), filters={"name": "Plumbing"})
    assert not services.exists(db, ctx_a.tenant_only(), filters={"name": "Plumbing"})


def test_get_outside_scope_is_not_found(db, ctx_b, catalogue):
    with pytest.raises(NotFound):
        services.get(db, ctx_b.tenant_only(), catalogue[0].id)
    assert services.find(db, ctx_b.tenant_only(), catalogue[0].id) is None


def test_update_order_assigns_indexes(db, ctx_a, catalogue):
    ids = [s.id for s in reversed(catalogue)]
    with transaction(db):
        services.update_order(db, ctx_a.tenant_only(), ids)
    assert [s.id for s in services.list_all(db, ctx_a.tenant_only(), sort="order")] == ids


def test_update_order_is_all_or_nothing(db, ctx_a, ctx_b, catalogue):
    foreign = services.list_all(db, ctx_b.tenant_only())[0]
    before = [(s.id, s.order) for s in services.list_all(db, ctx_a.tenant_only())]

    with pytest.raises(NotFound):
        with transaction(db):
            services.update_order(db, ctx_a.tenant_only(), [catalogue[2].id, foreign.id, catalogue[0].id])
    with pytest.raises(InvalidArgument):
        with transaction(db):
            services.update_order(db, ctx_a.tenant_only(), [catalogue[0].id, catalogue[0].id])

    db.expire_all()
    assert [(s.id, s.order) for s in services.list_all(db, ctx_a.tenant_only())] == before
    assert foreign.order == 0


def test_max_order(db, ctx_a, tenant_a):
    assert faqs.max_order(db, ctx_a.tenant_only()) == -1
    db.add(Faq(tenant_id=tenant_a.id, question="Q?", answer="A", order=4))
    db.flush()
    assert faqs.max_order(db, ctx_a.tenant_only()) == 4


def test_tenant_and_system_scope_includes_shared_rows(db, ctx_a, ctx_b, system_types):
    component_registry.create(db, ctx_b, {
        "slug": "b_only", "name": "B only",
        "fields": [{"name": "title", "label": "Title", "type": "text"}],
    })
    visible = component_types.count(db, ctx_a.tenant_and_system())
    assert visible == len(system_types)
    assert component_types.count(db, ctx_a.tenant_only()) == 0
    assert component_types.count(db, ctx_b.tenant_and_system()) == len(system_types) + 1


def test_catalog_lookup():
    assert get_catalog_repository("services") is services
    with pytest.raises(NotFound):
        get_catalog_repository("users")


def test_transaction_helper_commits_all_or_nothing(db, ctx_a, tenant_a):
    def _write(session):
        session.add(Faq(tenant_id=tenant_a.id, question="One?", answer="a", order=0))
        session.add(Faq(tenant_id=tenant_a.id, question="Two?", answer="b", order=1))
        session.flush()
        return faqs.count(session, ctx_a.tenant_only())

    assert faqs.transaction(db, _write) == 2

    def _fails(session):
        session.add(Faq(tenant_id=tenant_a.id, question="Three?", answer="c", order=2))
        session.flush()
        raise NotFound("Gone")

    with pytest.raises(NotFound):
        faqs.transaction(db, _fails)
    assert faqs.count(db, ctx_a.tenant_only()) == 2


def test_search_treats_like_wildcards_literally(db, ctx_a, tenant_a):
    _services(db, tenant_a, [("100% organic", True), ("1000 items", True), ("abc", True), ("a_c", True)])
    assert [s.name for s in services.paginate(db, ctx_a.tenant_only(), search="100%").items] == ["100% organic"]
    assert [s.name for s in services.paginate(db, ctx_a.tenant_only(), search="a_c").items] == ["a_c"]


def test_filter_values_are_cast_to_column_type(db, ctx_a):
    stmt = services.apply_filters(
        services.select(ctx_a.tenant_only()),
        {"slug": 2024, "order": "1", "is_published": "false", "id": ["3", 4]},
    )
    params = stmt.compile().params
    assert params["slug_1"] == "2024"
    assert params["order_1"] == 1
    assert params["is_published_1"] is False
    assert params["id_1"] == [3, 4]


@pytest.mark.parametrize("filters", [{"order": "first"}, {"is_published": "maybe"}, {"id": ["1", "x"]}])
def test_uncastable_filter_values_are_rejected(db, ctx_a, filters):
    with pytest.raises(InvalidArgument) as exc:
        services.paginate(db, ctx_a.tenant_only(), filters=filters)
    assert set(exc.value.errors) == set(filters)
