from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import MenuViewSet

app_name = 'menus'

# 끝의 슬래시는 선택 (/api/menus, /api/menus/ 모두 허용)
router = SimpleRouter()
router.trailing_slash = '/?'
router.register(r'menus', MenuViewSet, basename='menu')

urlpatterns = [
    path('', include(router.urls)),
]

# =============================================================================
# 생성된 URL 패턴:
# =============================================================================
# GET    /api/menus                 - 메뉴 트리 조회
# POST   /api/menus                 - 메뉴 생성
# GET    /api/menus/{id}            - 메뉴 상세 (parent, children 포함)
# PUT    /api/menus/{id}            - 메뉴 수정
# DELETE /api/menus/{id}            - 메뉴 삭제 (하위 메뉴 포함)
# PATCH  /api/menus/{id}/move       - 다른 상위 메뉴로 이동
# PATCH  /api/menus/{id}/reorder    - 같은 레벨 내 순서 변경
# =============================================================================
