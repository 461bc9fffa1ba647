"""
API Views for the Loyalty application.
"""

from rest_framework import generics, mixins, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.pagination import PageQuerySerializer
from loyalty.directory import MerchantDirectory
from loyalty.exceptions import NotFoundError
from loyalty.models import Merchant
from loyalty.serializers import (
    MerchantPageQuerySerializer,
    MerchantSerializer,
    PointsBalanceSerializer,
    SettlementSerializer,
    TransactionReadSerializer,
)
from loyalty.stores import PointsBalanceStore, TransactionStore
from users.permissions import IsAdminRole, IsMerchantRole


class MerchantViewSet(viewsets.ModelViewSet):
    """
    API endpoint for Merchants.
    Anyone logged in can browse; merchants manage the ones they created.
    """

    serializer_class = MerchantSerializer

    def get_queryset(self):
        # Soft-deleted merchants are excluded by the default manager
        return Merchant.objects.select_related("address").order_by("id")

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsAuthenticated()]
        return [IsMerchantRole()]

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    def perform_update(self, serializer):
        if serializer.instance.owner_id != self.request.user.pk:
            raise PermissionDenied("You can only update merchants that you created yourself")
        serializer.save()

    def perform_destroy(self, instance):
        if instance.owner_id != self.request.user.pk:
            raise PermissionDenied("You can only delete merchants that you created yourself")
        instance.delete()


class TransactionViewSet(
    mixins.CreateModelMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet
):
    """
    POST /api/transactions/        record a purchase (any logged in user)
    GET  /api/transactions/[<id>/] history (admins only)
    """

    def get_queryset(self):
        return TransactionStore().list_all()

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated()]
        return [IsAdminRole()]

    def get_serializer_class(self):
        if self.action == "create":
            return SettlementSerializer
        return TransactionReadSerializer


class MyPointsView(generics.ListAPIView):
    """
    GET /api/me/points/
    All point balances of the logged in user.
    """

    serializer_class = PointsBalanceSerializer

    def get_queryset(self):
        return PointsBalanceStore().list_balances(self.request.user.pk)


class MyPointsForMerchantView(APIView):
    """
    GET /api/me/points/<merchant_id>/
    The logged in user's balance with one merchant.
    """

    def get(self, request, merchant_id):
        balance = PointsBalanceStore().get_balance(request.user.pk, merchant_id)
        if balance is None:
            raise NotFoundError(f"No points found for your user with merchant id: {merchant_id}")
        return Response(PointsBalanceSerializer(balance).data)


class MyMerchantsView(generics.ListAPIView):
    """
    GET /api/me/merchants/
    Merchants created by the logged in user.
    """

    serializer_class = MerchantSerializer

    def get_queryset(self):
        return Merchant.objects.filter(owner=self.request.user).select_related("address").order_by("id")


class MyTransactionsView(APIView):
    """
    GET /api/me/transactions/?amount=8&page=2
    One page of the logged in user's transactions, newest first.
    """

    def get(self, request):
        query = PageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        transactions = TransactionStore().list_for_user(
            request.user.pk, query.validated_data["amount"], query.validated_data["page"]
        )
        return Response(TransactionReadSerializer(transactions, many=True).data)


class MyMerchantTransactionsView(APIView):
    """
    GET /api/me/merchants/transactions/?id=1&amount=8&page=2
    One page of transactions of a merchant owned by the logged in user.
    """

    def get(self, request):
        query = MerchantPageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        merchant = MerchantDirectory().assert_owner(query.validated_data["id"], request.user.pk)
        transactions = TransactionStore().list_for_merchant(
            merchant.id, query.validated_data["amount"], query.validated_data["page"]
        )
        return Response(TransactionReadSerializer(transactions, many=True).data)
