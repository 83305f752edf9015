from rest_framework import serializers
from .models import Menu, MAX_ORDER


# 프론트에 내려줄 형태 (camelCase)
class MenuSerializer(serializers.ModelSerializer):
    parentId = serializers.UUIDField(source='parent_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Menu
        fields = [
            "id",
            "name",
            "url",
            "icon",
            "order",
            "parentId",
            "depth",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


# 메뉴 상세 (parent, children 포함)
class MenuDetailSerializer(MenuSerializer):
    parent = MenuSerializer(read_only=True, allow_null=True)
    children = serializers.SerializerMethodField()

    class Meta(MenuSerializer.Meta):
        fields = MenuSerializer.Meta.fields + ["parent", "children"]
        read_only_fields = fields

    def get_children(self, obj):
        children = sorted(obj.children.all(), key=lambda child: child.order)
        return MenuSerializer(children, many=True).data


class MenuCreateSerializer(serializers.Serializer):
    """메뉴 생성 요청"""
    name = serializers.CharField(
        max_length=255,
        error_messages={
            'required': '메뉴명은 필수입니다.',
            'blank': '메뉴명은 필수입니다.',
            'max_length': '메뉴명은 255자를 초과할 수 없습니다.',
        }
    )
    url = serializers.CharField(
        max_length=500, required=False, allow_null=True, allow_blank=True,
        error_messages={'max_length': 'URL은 500자를 초과할 수 없습니다.'}
    )
    icon = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True,
        error_messages={'max_length': '아이콘은 100자를 초과할 수 없습니다.'}
    )
    order = serializers.IntegerField(
        min_value=0, max_value=MAX_ORDER, required=False,
        error_messages={
            'invalid': '순서는 정수여야 합니다.',
            'min_value': '순서는 0 이상이어야 합니다.',
            'max_value': f'순서는 {MAX_ORDER} 이하여야 합니다.',
        }
    )
    parentId = serializers.UUIDField(
        source='parent_id', required=False, allow_null=True,
        error_messages={'invalid': '상위 메뉴 ID는 올바른 UUID여야 합니다.'}
    )


class MenuUpdateSerializer(MenuCreateSerializer):
    """메뉴 수정 요청 (모든 필드 선택)"""
    name = serializers.CharField(
        max_length=255, required=False,
        error_messages={
            'blank': '메뉴명은 비어 있을 수 없습니다.',
            'max_length': '메뉴명은 255자를 초과할 수 없습니다.',
        }
    )


class MenuMoveSerializer(serializers.Serializer):
    """메뉴 이동 요청 (newParentId 가 없거나 null 이면 최상위로 이동)"""
    newParentId = serializers.UUIDField(
        required=False, allow_null=True, default=None,
        error_messages={'invalid': '상위 메뉴 ID는 올바른 UUID여야 합니다.'}
    )


class MenuReorderSerializer(serializers.Serializer):
    """같은 레벨 안에서 순서 변경 요청"""
    newOrder = serializers.IntegerField(
        min_value=0, max_value=MAX_ORDER,
        error_messages={
            'required': '새 순서는 필수입니다.',
            'invalid': '새 순서는 정수여야 합니다.',
            'min_value': '새 순서는 0 이상이어야 합니다.',
            'max_value': f'새 순서는 {MAX_ORDER} 이하여야 합니다.',
        }
    )
