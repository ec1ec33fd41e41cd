# app/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.database import SessionLocal
from app.data.models.product import ProductModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "UNIFACTOR Mens Running Shoes", "category": "Fashion", "cost": Decimal("50"), "rating": 5},
    {"name": "YONEX Smash Badminton Racquet", "category": "Sports", "cost": Decimal("100"), "rating": 5},
    {"name": "Tan Leatherette Weekender Duffle", "category": "Fashion", "cost": Decimal("150"), "rating": 4},
    {"name": "The Minimalist Slim Leather Watch", "category": "Electronics", "cost": Decimal("60"), "rating": 5},
]


def seed(db: Session | None = None) -> int:
    """Wstawia katalog produktow, tylko jesli tabela jest pusta. Zwraca liczbe dodanych."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return 0
        db.add_all([ProductModel(**p) for p in PRODUCTS])
        db.commit()
        logger.info(f"Seeded {len(PRODUCTS)} products")
        return len(PRODUCTS)
    finally:
        if own_session:
            db.close()
