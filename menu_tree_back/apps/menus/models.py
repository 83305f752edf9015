import uuid

from django.db import models

# PositiveIntegerField 가 모든 DB 에서 허용하는 최댓값
MAX_ORDER = 2147483647


# 메뉴 트리 노드 (parent-child 구조 + depth/order 관리)
class Menu(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, verbose_name='메뉴명')
    url = models.CharField(max_length=500, blank=True, null=True, verbose_name='URL')
    icon = models.CharField(max_length=100, blank=True, null=True, verbose_name='아이콘')

    # 같은 parent 안에서의 정렬 순서 (최상위는 parent=NULL)
    order = models.PositiveIntegerField(default=0, verbose_name='정렬 순서')

    parent = models.ForeignKey(
        "self",
        related_name="children",
        on_delete=models.CASCADE,
        blank=True,
        null=True,
        verbose_name='상위 메뉴'
    )

    # 0 = 최상위, 그 외 parent.depth + 1
    depth = models.PositiveIntegerField(default=0, verbose_name='깊이')

    created_at = models.DateTimeField(auto_now_add=True, verbose_name='생성일시')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='수정일시')

    class Meta:
        db_table = 'menus'
        ordering = ['depth', 'order']
        indexes = [
            models.Index(fields=['parent', 'order'], name='menus_parent_order_idx'),
        ]
        verbose_name = '메뉴'
        verbose_name_plural = '메뉴'

    def __str__(self):
        return self.name

    @property
    def is_root(self):
        return self.parent_id is None
