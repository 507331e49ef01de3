"""
Seed script -- populates the database with the hardware catalog.

Run with:
    python -m hardware_store.seed

Idempotent: categories are matched by slug, products by name, and the admin
profile by id, so re-running only fills in what is missing.
"""

import logging
import os
import uuid

from sqlalchemy import text
from sqlalchemy.engine import Engine

from hardware_store.core.config import Config
from hardware_store.db import create_db_engine, init_db
from hardware_store.utils.validators import ValidationUtils

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Building Materials", "Cement, blocks, sand and aggregates"),
    ("Roofing", "Iron sheets, nails and roofing accessories"),
    ("Power Tools", "Drills, grinders and saws"),
    ("Hand Tools", "Wrenches, hammers and screwdrivers"),
    ("Storage", "Tool boxes and organizers"),
    ("Measuring Tools", "Levels, tapes and squares"),
    ("Safety Equipment", "Helmets, gloves and boots"),
    ("Fasteners", "Nails, screws and bolts"),
    ("Paint Supplies", "Paint, brushes and rollers"),
    ("Electrical", "Cables, switches and sockets"),
    ("Plumbing", "Pipes, fittings and taps"),
]

PRODUCTS = [
    {
        "name": "Tororo Cement 50kg Bag",
        "price": 35000,
        "original_price": None,
        "image": "/tororo-cement-bag-50kg.jpg",
        "badge": "Best Seller",
        "category": "Building Materials",
        "description": "Premium Portland cement for foundations, walls and structural work.",
        "stock_quantity": 500,
        "is_featured": True,
    },
    {
        "name": "Iron Sheets 28 Gauge (3m)",
        "price": 28000,
        "original_price": None,
        "image": "/corrugated-iron-roofing-sheet.jpg",
        "badge": "Popular",
        "category": "Roofing",
        "description": "Galvanized corrugated roofing sheet, 28 gauge, 3 metres long.",
        "stock_quantity": 300,
        "is_featured": True,
    },
    {
        "name": "Iron Sheets 30 Gauge (3m)",
        "price": 25000,
        "original_price": 27000,
        "image": "/corrugated-metal-roofing-sheet.jpg",
        "badge": "Sale",
        "category": "Roofing",
        "description": "Economical corrugated roofing sheet for residential work.",
        "stock_quantity": 300,
        "is_featured": False,
    },
    {
        "name": "Professional Cordless Drill Set",
        "price": 550000,
        "original_price": 650000,
        "image": "/cordless-drill-set-with-battery.jpg",
        "badge": "Sale",
        "category": "Power Tools",
        "description": "20V cordless drill with battery, charger and accessories.",
        "stock_quantity": 25,
        "is_featured": True,
    },
    {
        "name": "Heavy Duty Tool Box",
        "price": 320000,
        "original_price": None,
        "image": "/red-metal-tool-box-storage.jpg",
        "badge": None,
        "category": "Storage",
        "description": "Steel tool box with three trays and a locking latch.",
        "stock_quantity": 40,
        "is_featured": False,
    },
    {
        "name": "Socket Wrench Set (120pc)",
        "price": 480000,
        "original_price": None,
        "image": "/socket-wrench-set-in-case.jpg",
        "badge": "Popular",
        "category": "Hand Tools",
        "description": "120-piece chrome vanadium socket set in a carry case.",
        "stock_quantity": 30,
        "is_featured": True,
    },
    {
        "name": "Laser Level & Measuring Tool",
        "price": 290000,
        "original_price": 350000,
        "image": "/laser-level-measuring-tool.jpg",
        "badge": "Sale",
        "category": "Measuring Tools",
        "description": "Self-levelling laser level with a 30 metre range.",
        "stock_quantity": 20,
        "is_featured": False,
    },
    {
        "name": "Tororo Cement 25kg Bag",
        "price": 18000,
        "original_price": None,
        "image": "/tororo-cement-bag-50kg.jpg",
        "badge": None,
        "category": "Building Materials",
        "description": "Half-size bag of Tororo Portland cement for smaller jobs.",
        "stock_quantity": 400,
        "is_featured": False,
    },
]


def seed(engine: Engine, admin_id: str = "admin", admin_email: str = "admin@hardware.example") -> dict:
    """Insert missing catalog rows and the admin profile; returns insert counts."""
    counts = {"categories": 0, "products": 0, "profiles": 0}
    with engine.begin() as conn:
        # ------------------------------------------------------------------ #
        # Categories                                                           #
        # ------------------------------------------------------------------ #
        category_ids = {}
        for name, description in CATEGORIES:
            slug = ValidationUtils.slugify(name)
            existing = conn.execute(
                text("SELECT id FROM categories WHERE slug = :slug"), {"slug": slug}
            ).scalar()
            if existing is None:
                existing = conn.execute(
                    text(
                        "INSERT INTO categories (name, slug, description) "
                        "VALUES (:name, :slug, :description) RETURNING id"
                    ),
                    {"name": name, "slug": slug, "description": description},
                ).scalar_one()
                counts["categories"] += 1
            category_ids[name] = existing

        # ------------------------------------------------------------------ #
        # Products                                                             #
        # ------------------------------------------------------------------ #
        for product in PRODUCTS:
            found = conn.execute(
                text("SELECT 1 FROM products WHERE name = :name"), {"name": product["name"]}
            ).first()
            if found:
                continue
            params = {k: v for k, v in product.items() if k != "category"}
            params["id"] = str(uuid.uuid4())
            params["category_id"] = category_ids[product["category"]]
            conn.execute(
                text(
                    "INSERT INTO products (id, name, description, price, original_price, image, "
                    "badge, category_id, stock_quantity, is_featured) "
                    "VALUES (:id, :name, :description, :price, :original_price, :image, "
                    ":badge, :category_id, :stock_quantity, :is_featured)"
                ),
                params,
            )
            counts["products"] += 1

        # ------------------------------------------------------------------ #
        # Admin profile                                                        #
        # ------------------------------------------------------------------ #
        found = conn.execute(
            text("SELECT 1 FROM profiles WHERE id = :id"), {"id": admin_id}
        ).first()
        if not found:
            conn.execute(
                text(
                    "INSERT INTO profiles (id, email, full_name, is_admin) "
                    "VALUES (:id, :email, :full_name, :is_admin)"
                ),
                {"id": admin_id, "email": admin_email, "full_name": "Store Admin", "is_admin": True},
            )
            counts["profiles"] += 1

    logger.info(
        f"Seeded {counts['categories']} categories, {counts['products']} products, "
        f"{counts['profiles']} profiles"
    )
    return counts


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s")
    cfg = Config()
    db_engine = create_db_engine(cfg.database)
    init_db(db_engine)
    seed(
        db_engine,
        admin_id=os.getenv("SEED_ADMIN_ID", "admin"),
        admin_email=os.getenv("SEED_ADMIN_EMAIL", "admin@hardware.example"),
    )
