# storefront/data/seed.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.data import models  # noqa: F401
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models.product import ProductModel
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG = [
    ("Silk Evening Dress", "89.00", 12, "Dresses", True),
    ("Linen Summer Shirt", "45.00", 30, "Tops", True),
    ("Wool Overcoat", "220.00", 5, "Outerwear", True),
    ("Leather Ankle Boots", "135.00", 8, "Shoes", True),
    ("Cashmere Scarf", "60.00", 20, "Accessories", False),
    ("Pleated Midi Skirt", "70.00", 15, "Bottoms", False),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repo = ProductRepo(db)
        # not forcing: only seed if empty
        if repo.list_products(limit=1):
            logger.info("Products already seeded")
            return

        now = datetime.now(timezone.utc)
        repo.add_products(
            [
                ProductModel(
                    name=name,
                    price=Decimal(price),
                    stock=stock,
                    category=category,
                    featured=featured,
                    description=f"{name} from the {category.lower()} collection.",
                    created_at=now - timedelta(minutes=i),
                )
                for i, (name, price, stock, category, featured) in enumerate(CATALOG)
            ]
        )
        logger.info(f"Seeded {len(CATALOG)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
