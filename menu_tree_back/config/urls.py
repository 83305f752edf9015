from django.contrib import admin
from django.urls import path, include

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
)
from apps.common.views import HealthCheckView


urlpatterns = [
    # Health Check (Docker/K8s용 - 인증 불필요)
    path("health/", HealthCheckView.as_view(), name="health_check"),

    path("admin/", admin.site.urls),

    # 메뉴 관리 API
    path("api/", include("apps.menus.urls")),

    # API 문서화 엔드포인트
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
]
