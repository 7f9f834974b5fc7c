"""
multiagent_store.db.models

Persistence schema for the product catalog.

Responsibilities:
- Define the `Product` ORM model (table `products`, integer identity key).
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from multiagent_store.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    image_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")

    def __repr__(self) -> str:
        return f"Product(id={self.id!r}, name={self.name!r})"
