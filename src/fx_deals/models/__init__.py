"""ORM model registry. Import all models so Alembic autogenerate discovers them."""

from fx_deals.models.base import Base
from fx_deals.models.fx_deal import FxDeal

__all__ = [
    "Base",
    "FxDeal",
]
