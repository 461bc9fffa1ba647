"""
Serializers for the Loyalty application.
"""

from django.db import transaction
from rest_framework import serializers

from core.pagination import PageQuerySerializer
from loyalty.models import Address, Merchant, PointsBalance, Transaction
from loyalty.money import MAX_MINOR_UNITS
from loyalty.services import SettlementService
from users.serializers import UserDetailSerializer


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ["id", "street", "zip_code", "city", "country"]
        read_only_fields = ["id"]


class MerchantSerializer(serializers.ModelSerializer):
    """
    Serializer for the Merchant model, with its address nested (read and write).
    """

    address = AddressSerializer()
    points_percentage = serializers.DecimalField(max_digits=5, decimal_places=4, min_value=0, max_value=1)

    class Meta:
        model = Merchant
        fields = ["id", "name", "points_percentage", "address", "owner"]
        read_only_fields = ["id", "owner"]

    def create(self, validated_data):
        address_data = validated_data.pop("address")

        with transaction.atomic():
            address = Address.objects.create(**address_data)
            merchant = Merchant.objects.create(address=address, **validated_data)

        return merchant

    def update(self, instance, validated_data):
        address_data = validated_data.pop("address", None)

        with transaction.atomic():
            if address_data:
                for field, value in address_data.items():
                    setattr(instance.address, field, value)
                instance.address.save()

            for field, value in validated_data.items():
                setattr(instance, field, value)
            instance.save()

        return instance


class TransactionReadSerializer(serializers.ModelSerializer):
    """
    A settled transaction, enriched with the merchant and the user.
    """

    merchant = MerchantSerializer(read_only=True)
    user = UserDetailSerializer(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "amount",
            "points_used",
            "formatted_amount",
            "message",
            "merchant",
            "user",
            "points_earned",
            "created_at",
        ]


class SettlementSerializer(serializers.Serializer):
    """
    Serializer for recording a purchase (POST /api/transactions/).

    Only checks the request shape; every business rule lives in SettlementService.
    """

    merchant_id = serializers.IntegerField()
    amount = serializers.IntegerField(min_value=0, max_value=MAX_MINOR_UNITS)
    points_used = serializers.IntegerField(min_value=0, max_value=MAX_MINOR_UNITS, default=0)
    formatted_amount = serializers.CharField(max_length=64)
    message = serializers.CharField(allow_blank=True, required=False, default="")

    def create(self, validated_data):
        request = self.context["request"]
        return SettlementService().settle(user=request.user, **validated_data)

    def to_representation(self, instance):
        return TransactionReadSerializer(instance, context=self.context).data


class PointsBalanceSerializer(serializers.ModelSerializer):
    merchant = MerchantSerializer(read_only=True)

    class Meta:
        model = PointsBalance
        fields = ["id", "amount", "merchant", "updated_at"]


class MerchantPageQuerySerializer(PageQuerySerializer):
    """
    Query parameters of /api/me/merchants/transactions/?id=1&amount=8&page=0
    """

    id = serializers.IntegerField()
