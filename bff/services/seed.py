"""
Demo-data bootstrap.

Runs once per store: only when there are no users AND no admin account,
so a partially seeded store is left alone rather than duplicated.
"""

from __future__ import annotations

import logging

from bff.api.deps import Repositories
from bff.core.config import Settings
from bff.models.catalog import Category, Product
from bff.models.user import User, UserProfile

logger = logging.getLogger(__name__)

DEMO_USERS = (
    ("user@demo", "User123!", "user", "User"),
    ("manager@demo", "Manager123!", "manager", "Manager"),
)

DEMO_CATALOG: dict[tuple[str, str, str], list[tuple[str, str, float, int]]] = {
    ("Electronics", "Electronic devices and gadgets", "/products/electronics.svg"): [
        ("Wireless Headphones", "High-quality wireless Bluetooth headphones", 79.99, 45),
        ("USB-C Cable", "Durable USB-C charging and data cable", 12.99, 150),
        ("Smartphone Stand", "Adjustable aluminum smartphone stand", 24.99, 67),
        ("Wireless Mouse", "Ergonomic wireless mouse with rechargeable battery", 34.99, 89),
        ("Mechanical Keyboard", "RGB mechanical gaming keyboard", 129.99, 23),
        ("Webcam HD", "1080p HD webcam with auto-focus", 59.99, 34),
        ("External SSD 1TB", "Portable external SSD with USB 3.1", 119.99, 45),
        ("Power Bank 20000mAh", "High-capacity portable power bank", 39.99, 78),
        ("Smart Watch", "Fitness tracker with heart rate monitor", 199.99, 12),
        ("Bluetooth Speaker", "Waterproof portable Bluetooth speaker", 49.99, 56),
    ],
    ("Clothing", "Apparel and fashion items", "/products/clothing.svg"): [
        ("Cotton T-Shirt", "Comfortable 100% cotton t-shirt", 24.99, 8),
        ("Blue Jeans", "Classic blue denim jeans", 59.99, 0),
        ("Hoodie", "Warm fleece hoodie with pockets", 49.99, 34),
        ("Running Shoes", "Lightweight running shoes with cushioning", 89.99, 27),
        ("Winter Jacket", "Waterproof winter jacket with hood", 129.99, 15),
        ("Wool Scarf", "Soft wool scarf in multiple colors", 19.99, 62),
        ("Baseball Cap", "Adjustable baseball cap with embroidery", 14.99, 103),
        ("Leather Belt", "Genuine leather belt with metal buckle", 29.99, 73),
    ],
    ("Books", "Books and reading materials", "/products/books.svg"): [
        ("Clean Code", "A Handbook of Agile Software Craftsmanship", 39.99, 23),
        ("Design Patterns", "Elements of Reusable Object-Oriented Software", 44.99, 5),
        ("The Pragmatic Programmer", "Your Journey To Mastery", 42.99, 31),
        ("Refactoring", "Improving the Design of Existing Code", 47.99, 18),
        ("Introduction to Algorithms", "Comprehensive algorithms textbook", 89.99, 9),
        ("The Art of Computer Programming", "Donald Knuth classic series", 199.99, 4),
    ],
    ("Home & Garden", "Home and garden products", "/products/home-garden.svg"): [
        ("LED Floor Lamp", "Modern LED floor lamp with dimmer", 89.99, 12),
        ("Plant Pot", "Ceramic plant pot with drainage", 29.99, 67),
        ("Garden Tools Set", "5-piece stainless steel garden tools", 39.99, 28),
        ("Throw Pillow", "Decorative throw pillow with removable cover", 19.99, 88),
        ("Wall Clock", "Modern minimalist wall clock", 34.99, 45),
        ("Scented Candles", "Set of 4 aromatic scented candles", 29.99, 71),
        ("Watering Can", "2-gallon galvanized watering can", 22.99, 59),
        ("Area Rug", "5x7 ft modern geometric area rug", 89.99, 14),
    ],
}


class Seeder:
    def __init__(self, repos: Repositories, settings: Settings) -> None:
        self.repos = repos
        self.settings = settings

    async def needs_seed(self) -> bool:
        if await self.repos.users.count() > 0:
            return False
        return not await self.repos.users.get_by_role("admin")

    async def seed_all(self) -> bool:
        """Seed demo data if the store is empty. Returns True when anything was seeded."""
        if not self.repos.users.store.is_live or not await self.needs_seed():
            return False
        await self.seed_users()
        if self.settings.SEED_CATALOG:
            await self.seed_catalog()
        logger.info(
            "Demo data seeded: %d users, %d categories, %d products",
            await self.repos.users.count(),
            await self.repos.categories.count(),
            await self.repos.products.count(),
        )
        return True

    async def seed_users(self) -> None:
        accounts = [
            *DEMO_USERS,
            (self.settings.FIRST_ADMIN_EMAIL, self.settings.FIRST_ADMIN_PASSWORD, "admin", "Admin"),
        ]
        for email, password, role, last_name in accounts:
            await self.repos.users.create(
                User(
                    email=email.lower(),
                    password=password,
                    role=role,
                    profile=UserProfile(first_name="Demo", last_name=last_name),
                )
            )

    async def seed_catalog(self) -> None:
        for (name, description, image_url), products in DEMO_CATALOG.items():
            category = Category(name=name, description=description)
            await self.repos.categories.create(category)
            for product_name, product_description, price, stock in products:
                await self.repos.products.create(
                    Product(
                        name=product_name,
                        description=product_description,
                        price=price,
                        stock=stock,
                        category_id=category.id,
                        image_url=image_url,
                    )
                )
