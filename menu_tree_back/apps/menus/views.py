from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiResponse

from .serializers import (
    MenuSerializer,
    MenuDetailSerializer,
    MenuCreateSerializer,
    MenuUpdateSerializer,
    MenuMoveSerializer,
    MenuReorderSerializer,
)
from .services import MenuTreeService


UUID_REGEX = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


@extend_schema_view(
    list=extend_schema(
        summary="메뉴 트리 조회",
        description="전체 메뉴를 중첩 트리 구조로 조회합니다.",
        responses={200: MenuSerializer(many=True)},
    ),
    retrieve=extend_schema(
        summary="메뉴 상세 조회",
        responses={200: MenuDetailSerializer, 404: OpenApiResponse(description="메뉴 없음")},
    ),
    create=extend_schema(
        summary="메뉴 생성",
        request=MenuCreateSerializer,
        responses={
            201: MenuSerializer,
            400: OpenApiResponse(description="입력값 오류"),
            404: OpenApiResponse(description="상위 메뉴 없음"),
        },
    ),
    update=extend_schema(
        summary="메뉴 수정",
        request=MenuUpdateSerializer,
        responses={
            200: MenuDetailSerializer,
            400: OpenApiResponse(description="입력값 오류 / 순환 구조"),
            404: OpenApiResponse(description="메뉴 없음"),
        },
    ),
    destroy=extend_schema(
        summary="메뉴 삭제",
        description="메뉴와 모든 하위 메뉴를 삭제합니다.",
        responses={204: None, 404: OpenApiResponse(description="메뉴 없음")},
    ),
)
class MenuViewSet(viewsets.ViewSet):
    """
    메뉴 트리 CRUD ViewSet

    생성/수정/삭제 외에 다른 부모로 이동(move)과 같은 레벨 내 순서 변경(reorder)을 제공합니다.
    """
    permission_classes = [AllowAny]
    lookup_value_regex = UUID_REGEX

    def get_service(self):
        return MenuTreeService()

    def list(self, request):
        return Response(self.get_service().find_all())

    def retrieve(self, request, pk=None):
        menu = self.get_service().find_one(pk)
        return Response(MenuDetailSerializer(menu).data)

    def create(self, request):
        serializer = MenuCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        menu = self.get_service().create(serializer.validated_data)
        return Response(MenuSerializer(menu).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = MenuUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        menu = self.get_service().update(pk, serializer.validated_data)
        return Response(MenuDetailSerializer(menu).data)

    def destroy(self, request, pk=None):
        self.get_service().remove(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="메뉴 이동",
        description="메뉴를 다른 상위 메뉴 아래로 이동합니다. newParentId 가 없으면 최상위로 이동합니다.",
        request=MenuMoveSerializer,
        responses={
            200: MenuDetailSerializer,
            400: OpenApiResponse(description="자기 자신/하위 메뉴로 이동"),
            404: OpenApiResponse(description="메뉴 또는 상위 메뉴 없음"),
        },
    )
    @action(detail=True, methods=['patch'])
    def move(self, request, pk=None):
        serializer = MenuMoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        menu = self.get_service().move(pk, serializer.validated_data['newParentId'])
        return Response(MenuDetailSerializer(menu).data)

    @extend_schema(
        summary="메뉴 순서 변경",
        description="같은 레벨 안에서 메뉴의 순서를 변경하고 형제 메뉴의 순서를 밀어냅니다.",
        request=MenuReorderSerializer,
        responses={
            200: MenuDetailSerializer,
            400: OpenApiResponse(description="입력값 오류"),
            404: OpenApiResponse(description="메뉴 없음"),
        },
    )
    @action(detail=True, methods=['patch'])
    def reorder(self, request, pk=None):
        serializer = MenuReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        menu = self.get_service().reorder(pk, serializer.validated_data['newOrder'])
        return Response(MenuDetailSerializer(menu).data)
