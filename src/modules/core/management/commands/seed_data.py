from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.orders.constants import OrderStatus
from modules.orders.dtos import OrderItemDTO, OrderItemsDTO, UpdateOrderStatusDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

CATALOG = [
    ("Monitor 27\"", "Electronics"),
    ("Mechanical Keyboard", "Electronics"),
    ("Gaming Mouse", "Electronics"),
    ("Notebook 14\"", "Electronics"),
    ("Headset", "Electronics"),
    ("Office Desk", "Furniture"),
    ("Ergonomic Chair", "Furniture"),
    ("Bookcase", "Furniture"),
    ("A4 Paper", "Office"),
    ("Blue Pen", "Office"),
    ("Stapler", "Office"),
    ("Calculator", "Office"),
]


class Command(BaseCommand):
    help = "Seed the database with products and sample orders."

    def add_arguments(self, parser):
        parser.add_argument("--products", type=int, default=len(CATALOG))
        parser.add_argument("--orders", type=int, default=20)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        products = self._seed_products(options["products"])
        orders_created, orders_skipped = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"skipped={orders_skipped}"
            )
        )

    def _seed_products(self, count: int) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for index in range(count):
            name, category = CATALOG[index % len(CATALOG)]
            if index >= len(CATALOG):
                name = f"{name} #{index // len(CATALOG) + 1}"
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "description": category,
                    "price": Decimal(random.randint(1000, 100000)) / 100,
                    "stock_quantity": random.randint(0, 100),
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, products: list[Product], count: int) -> tuple[int, int]:
        """Create orders through ``OrderService`` so stock is taken for real.

        Orders the current stock cannot cover are skipped.
        """
        self.stdout.write("Creating orders...")
        if not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no products)."))
            return 0, 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        created = skipped = 0
        for _ in range(count):
            picked = random.sample(products, k=min(random.randint(1, 3), len(products)))
            dto = OrderItemsDTO(
                items=[
                    OrderItemDTO(product_id=product.id, quantity=random.randint(1, 3))
                    for product in picked
                ]
            )
            result = service.create_order(dto)
            if not result.ok:
                skipped += 1
                continue

            status = random.choice(OrderStatus.values)
            if status != OrderStatus.PENDING:
                service.update_status(
                    str(result.value.id), UpdateOrderStatusDTO(status=status)
                )
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created, skipped
