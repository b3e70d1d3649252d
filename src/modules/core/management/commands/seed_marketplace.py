from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.constants import Role
from modules.accounts.models import ShopperProfile, VendorProfile
from modules.accounts.repositories.django_repository import RoleGrantDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.models import Order

DEMO_PASSWORD = "kwikmarket123"

# username -> roles granted
DEMO_USERS: dict[str, tuple[str, ...]] = {
    "ama.consumer": (Role.CONSUMER,),
    "kofi.vendor": (Role.CONSUMER, Role.VENDOR),
    "yaw.shopper": (Role.SHOPPER,),
    "efua.admin": (Role.ADMIN,),
}


class Command(BaseCommand):
    help = "Seed the database with demo marketplace users and one pending order."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding marketplace demo data...")

        users = self._seed_users()
        vendor, _ = VendorProfile.objects.get_or_create(
            user=users["kofi.vendor"],
            defaults={"business_name": "Kofi's Fresh Produce"},
        )
        shopper, _ = ShopperProfile.objects.get_or_create(
            user=users["yaw.shopper"],
            defaults={"display_name": "Yaw"},
        )

        order, created = Order.objects.get_or_create(
            consumer=users["ama.consumer"],
            vendor=vendor,
            defaults={
                "shopper": shopper,
                "status": OrderStatus.PENDING,
                "total": Decimal("85.50"),
            },
        )

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"order={order.id} ({'created' if created else 'existing'})"
            )
        )

    def _seed_users(self) -> dict:
        User = get_user_model()
        grants = RoleGrantDjangoRepository()
        users = {}
        for username, roles in DEMO_USERS.items():
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(username, password=DEMO_PASSWORD)
            for role in roles:
                grants.grant(user.pk, role)
            users[username] = user
        return users
