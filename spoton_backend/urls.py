# ==================== SPOTON_BACKEND/URLS.PY ====================
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from rest_framework import permissions
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenObtainPairView

from users.views import UserViewSet, CarViewSet
from parking.views import ParkingSpotViewSet, FavoriteViewSet
from bookings.views import BookingViewSet, OwnerBookingViewSet
from ledger.views import (
    OwnerWalletView, OwnerTransactionViewSet, OwnerWithdrawalViewSet, AdminWithdrawalViewSet, AdminTransactionViewSet
)
from payments.views import CommissionSettingView
from notifications.views import NotificationViewSet
from reviews.views import ReviewViewSet
from complaints.views import ComplaintViewSet

# Create router and register viewsets
router = DefaultRouter()
router.register(r'parking-spots', ParkingSpotViewSet, basename='parking-spot')
router.register(r'bookings', BookingViewSet, basename='booking')
router.register(r'cars', CarViewSet, basename='car')
router.register(r'notifications', NotificationViewSet, basename='notification')
router.register(r'owner/bookings', OwnerBookingViewSet, basename='owner-booking')
router.register(r'owner/transactions', OwnerTransactionViewSet, basename='owner-transaction')
router.register(r'owner/withdrawals', OwnerWithdrawalViewSet, basename='owner-withdrawal')
router.register(r'admin/withdrawals', AdminWithdrawalViewSet, basename='admin-withdrawal')
router.register(r'admin/transactions', AdminTransactionViewSet, basename='admin-transaction')
router.register(r'reviews', ReviewViewSet, basename='review')
router.register(r'complaints', ComplaintViewSet, basename='complaint')

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API versioning
    path('api/v1/', include([
        # Authentication endpoints
        path('auth/', include([
            path('register/', UserViewSet.as_view({'post': 'register'}), name='register'),
            path('login/', UserViewSet.as_view({'post': 'login'}), name='login'),
            path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
            path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
            path('profile/', UserViewSet.as_view(
                {'get': 'profile', 'put': 'profile'},
                permission_classes=[permissions.IsAuthenticated]
            ), name='profile'),
        ])),

        path('owner/wallet/', OwnerWalletView.as_view(), name='owner_wallet'),
        path('admin/settings/commission/', CommissionSettingView.as_view(), name='commission_settings'),

        path('favorites/', FavoriteViewSet.as_view({'get': 'list'}), name='favorites'),
        path('favorites/<int:parking_id>/', FavoriteViewSet.as_view(
            {'post': 'add', 'delete': 'remove'}
        ), name='favorite_detail'),

        # API routes
        path('', include(router.urls)),
    ])),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
