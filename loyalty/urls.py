"""
URL routing for the loyalty application API.
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from loyalty.views import (
    MerchantViewSet,
    MyMerchantsView,
    MyMerchantTransactionsView,
    MyPointsForMerchantView,
    MyPointsView,
    MyTransactionsView,
    TransactionViewSet,
)

router = DefaultRouter()
router.register(r"merchants", MerchantViewSet, basename="merchants")
router.register(r"transactions", TransactionViewSet, basename="transactions")

urlpatterns = [
    path("me/points/", MyPointsView.as_view(), name="me-points"),
    path("me/points/<int:merchant_id>/", MyPointsForMerchantView.as_view(), name="me-points-merchant"),
    path("me/merchants/", MyMerchantsView.as_view(), name="me-merchants"),
    path("me/merchants/transactions/", MyMerchantTransactionsView.as_view(), name="me-merchant-transactions"),
    path("me/transactions/", MyTransactionsView.as_view(), name="me-transactions"),
] + router.urls
