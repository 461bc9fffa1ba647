"""
Custom management command to seed demo data.
"""

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from loyalty.exceptions import LoyaltyError
from loyalty.models import Address, Merchant
from loyalty.services import SettlementService
from loyalty.stores import PointsBalanceStore

User = get_user_model()

DEMO_PASSWORD = "123456"

DEMO_ACCOUNTS = [
    ("admin@a.dk", "Admin", User.ROLE_ADMIN),
    ("user@a.dk", "User", User.ROLE_USER),
    ("merchant@a.dk", "Merchant", User.ROLE_MERCHANT),
]

# (name, street, zip, city, points percentage)
DEMO_MERCHANTS = [
    ("Netto", "Nettovej 32", "2000", "København", "0.02"),
    ("Kandas Thai Takeaway", "Strandbygade 32", "6700", "Esbjerg", "0.04"),
    ("Bilka", "Stormgade 16", "6710", "Esbjerg N", "0.00"),
    ("Nillers Pølsevogn", "Strandbygade 76", "6700", "Esbjerg", "0.10"),
    ("7/11", "Togbane 11", "6700", "Esbjerg", "0.01"),
    ("Flammen", "Exnersgade 25", "6700", "Esbjerg", "0.04"),
    ("Sunset Boulevard", "Storegade 114", "6700", "Esbjerg", "0.07"),
    ("Burger King", "Jernbanegade 12", "6700", "Esbjerg", "0.06"),
]


class Command(BaseCommand):
    help = "Seeds demo accounts, merchants and settled transactions"

    def add_arguments(self, parser):
        parser.add_argument("--transactions", type=int, default=50, help="Number of purchases to settle")

    def handle(self, *args, **options):
        num_transactions = options["transactions"]

        self.stdout.write(f" Seeding demo data (Tx: {num_transactions})...")

        accounts = {}
        for email, name, role in DEMO_ACCOUNTS:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(email=email, password=DEMO_PASSWORD, name=name, role=role)
            accounts[role] = user

        merchants = []
        for name, street, zip_code, city, percentage in DEMO_MERCHANTS:
            merchant = Merchant.objects.filter(name=name, owner=accounts[User.ROLE_MERCHANT]).first()
            if merchant is None:
                address = Address.objects.create(street=street, zip_code=zip_code, city=city, country="Denmark")
                merchant = Merchant.objects.create(
                    name=name,
                    owner=accounts[User.ROLE_MERCHANT],
                    address=address,
                    points_percentage=Decimal(percentage),
                )
            merchants.append(merchant)

        # Purchases go through the settlement service so balances stay consistent
        service = SettlementService()
        balances = PointsBalanceStore()
        buyer = accounts[User.ROLE_USER]
        settled = 0

        for _ in range(num_transactions):
            merchant = random.choice(merchants)
            amount = random.randint(100, 50000)

            balance = balances.get_balance(buyer.pk, merchant.pk)
            available = min(balance.amount, amount) if balance else 0
            points_used = random.randint(0, available) if available and random.random() < 0.3 else 0

            try:
                service.settle(
                    merchant_id=merchant.pk,
                    user=buyer,
                    amount=amount,
                    points_used=points_used,
                    formatted_amount=f"{amount / 100:.2f} kr.",
                    message=random.choice(["", "Thanks!", "Weekly groceries"]),
                )
                settled += 1
            except LoyaltyError as e:
                self.stderr.write(f" Skipped purchase at {merchant.name}: {e.message}")

        self.stdout.write(
            self.style.SUCCESS(
                f" Done! {len(accounts)} accounts, {len(merchants)} merchants, {settled} transactions settled."
            )
        )
