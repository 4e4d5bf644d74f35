"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `supplier_pricing/db/models/<table_name>.py`
    2. Import it here
"""

from supplier_pricing.db.models.base import Base
from supplier_pricing.db.models.price_update_job import PriceUpdateJob
from supplier_pricing.db.models.staged_price_update import StagedPriceUpdate
from supplier_pricing.db.models.supplier_product import SupplierProduct

__all__ = [
    "Base",
    "PriceUpdateJob",
    "StagedPriceUpdate",
    "SupplierProduct",
]
