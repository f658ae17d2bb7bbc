# tenantcms/models/auth.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenantcms.db.base import Base, JSONType


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(80), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(160))
    domain: Mapped[str | None] = mapped_column(String(255), unique=True, default=None)
    logo: Mapped[str | None] = mapped_column(String(512), default=None)
    favicon: Mapped[str | None] = mapped_column(String(512), default=None)
    # presentation skin lives outside this core; plain reference only
    active_template_id: Mapped[int | None] = mapped_column(Integer, default=None)
    settings: Mapped[dict | None] = mapped_column(JSONType, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    users: Mapped[list[User]] = relationship("User", back_populates="tenant")


class UserRole(str, Enum):
    super_admin = "super_admin"
    tenant_admin = "tenant_admin"
    editor = "editor"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str | None] = mapped_column(String(160), default=None)
    role: Mapped[UserRole] = mapped_column(SQLEnum(UserRole, native_enum=False), default=UserRole.editor)
    # home tenant; only super admins may have none
    tenant_id: Mapped[int | None] = mapped_column(ForeignKey("tenants.id", ondelete="SET NULL"), index=True, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    tenant: Mapped[Tenant | None] = relationship("Tenant", back_populates="users")

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.super_admin
