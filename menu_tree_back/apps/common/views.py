import logging

from django.db import DatabaseError
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.menus.services import MenuTreeService

logger = logging.getLogger(__name__)


class HealthCheckView(APIView):
    """
    메뉴 저장소 상태 확인

    menus 테이블을 읽어 메뉴 수와 트리 정합성 문제(depth/orphan/cycle) 수를 돌려준다.
    정합성 문제가 있으면 status 는 degraded, 테이블을 읽지 못하면 503.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["Health"],
        summary="메뉴 저장소 헬스 체크",
        description="메뉴 테이블 조회 가능 여부와 트리 정합성 문제 건수를 확인합니다.",
        responses={
            200: OpenApiResponse(description="정상 또는 정합성 문제 있음 (degraded)"),
            503: OpenApiResponse(description="메뉴 테이블 조회 불가"),
        }
    )
    def get(self, request):
        checked_at = timezone.now().isoformat()
        service = MenuTreeService()

        try:
            menu_count = len(service.repository.find_all())
            issues = service.check_tree()
        except DatabaseError as e:
            logger.error(f"Health check - menu store unavailable: {e}")
            return Response({
                "status": "unhealthy",
                "database": "disconnected",
                "timestamp": checked_at,
            }, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        if issues:
            logger.warning(f"Health check - menu tree has {len(issues)} issues")

        return Response({
            "status": "degraded" if issues else "healthy",
            "database": "connected",
            "menus": menu_count,
            "treeIssues": len(issues),
            "timestamp": checked_at,
        })
