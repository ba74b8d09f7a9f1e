from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.dtos import CreateProductDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

CATALOG = [
    ("Smartphone", "6.1\" OLED, 128 GB", Decimal("799.99"), 50),
    ("Laptop", "14\" ultrabook, 16 GB RAM", Decimal("1299.00"), 20),
    ("Wireless Mouse", "", Decimal("29.99"), 200),
    ("Mechanical Keyboard", "Hot-swappable switches", Decimal("149.90"), 75),
    ("USB-C Charger", "65 W GaN", Decimal("49.90"), 120),
    ("Headphones", "Noise cancelling", Decimal("249.00"), 40),
    ("Gift Card", "Redeemable online", Decimal("0.00"), 0),
]


class Command(BaseCommand):
    help = "Seed database with a small demo product catalogue."

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalogue...")

        repository = ProductDjangoRepository()
        service = ProductService(repository=repository)

        created = 0
        for name, description, price, quantity in CATALOG:
            if repository.get_by_name(name):
                continue
            service.create_product(
                CreateProductDTO(
                    name=name,
                    description=description,
                    price=price,
                    quantity=quantity,
                )
            )
            created += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={created}, skipped={len(CATALOG) - created}"
            )
        )
