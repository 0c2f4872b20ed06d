# designshop/products/repositories.py
import logging
from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.products.models import Product

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository:
    """Lecture du catalogue nécessaire au calcul des prix."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_many(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """Retourne les produits trouvés, indexés par ID. Les IDs absents sont omis."""
        ids = set(product_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Product).where(Product.id.in_(ids)))
        products = {product.id: product for product in result.scalars().all()}
        logger.debug(f"[ProductRepository] {len(products)}/{len(ids)} products resolved")
        return products
