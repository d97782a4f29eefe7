# ==================== PAYMENTS/VIEWS.PY ====================
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from utils.permissions import IsPlatformAdmin
from .models import PlatformSetting
from .serializers import CommissionSettingSerializer
from .services import CommissionService


class CommissionSettingView(APIView):
    """Admin view of the platform commission"""
    permission_classes = [permissions.IsAuthenticated, IsPlatformAdmin]

    def get(self, request):
        return Response({'success': True, 'data': CommissionSettingSerializer(PlatformSetting.load()).data})

    def put(self, request):
        serializer = CommissionSettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        setting = CommissionService.update_commission_percent(
            serializer.validated_data['commission_percent'],
            updated_by=request.user,
        )
        return Response({'success': True, 'data': CommissionSettingSerializer(setting).data})
