# tenantcms/models/content.py
# ComponentType (block schemas), Page and its ordered Sections
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenantcms.db.base import Base, JSONType


class ComponentType(Base):
    __tablename__ = "component_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    # NULL tenant_id => system type, visible to every tenant
    tenant_id: Mapped[Optional[int]] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=True)

    slug: Mapped[str] = mapped_column(String(64))
    name: Mapped[str] = mapped_column(String(128))
    description: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    fields: Mapped[list] = mapped_column(JSONType, default=list)           # list[FieldSpec]
    default_content: Mapped[dict] = mapped_column(JSONType, default=dict)
    default_styles: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    is_system: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # NULL tenant rows are not covered by this; system slug uniqueness is checked in the registry
        UniqueConstraint("tenant_id", "slug", name="uq_component_type_tenant_slug"),
        Index("ix_component_types_tenant_order", "tenant_id", "order"),
    )


class Page(Base):
    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)

    slug: Mapped[str] = mapped_column(String(128))
    title: Mapped[str] = mapped_column(String(255))
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    sections: Mapped[list["Section"]] = relationship(
        "Section", back_populates="page", cascade="all, delete-orphan", order_by="Section.order"
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "slug", name="uq_page_tenant_slug"),
    )


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(primary_key=True)
    # denormalized from the page for direct scoping
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)
    page_id: Mapped[int] = mapped_column(ForeignKey("pages.id", ondelete="CASCADE"), index=True)

    component_type: Mapped[str] = mapped_column(String(64))   # ComponentType.slug
    content: Mapped[dict] = mapped_column(JSONType, default=dict)
    styles: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    settings: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    # dense 0..n-1 per page, maintained by the page composition service
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    page: Mapped["Page"] = relationship("Page", back_populates="sections")

    __table_args__ = (
        Index("ix_sections_page_order", "page_id", "order"),
    )
