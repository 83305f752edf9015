"""메뉴 저장소 계층

트리 관리 로직(MenuTreeService)은 이 인터페이스만 사용하므로
ORM 없이 메모리 기반 저장소로도 테스트할 수 있다.
"""
from typing import ContextManager, Iterable, Optional, Protocol, runtime_checkable

from django.db import transaction
from django.db.models import Max, Prefetch

from .models import Menu


@runtime_checkable
class MenuRepositoryProtocol(Protocol):
    """메뉴 저장소가 제공해야 하는 기능"""

    def get(self, menu_id) -> Optional[Menu]:
        ...

    def find_all(self) -> list[Menu]:
        """전체 메뉴 (depth, order 오름차순)"""
        ...

    def find_by_parent(self, parent_id) -> list[Menu]:
        """같은 parent 를 가진 형제 메뉴 (order 오름차순). None 이면 최상위."""
        ...

    def max_order(self, parent_id) -> Optional[int]:
        ...

    def insert(self, menu: Menu) -> Menu:
        ...

    def update_fields(self, menu: Menu, fields: Iterable[str]) -> Menu:
        ...

    def delete(self, menu: Menu) -> None:
        """메뉴 삭제 (하위 트리 전체 CASCADE)"""
        ...

    def atomic(self) -> ContextManager:
        """블록 안의 쓰기가 모두 반영되거나 모두 취소되는 구간"""
        ...


class MenuRepository:
    """Django ORM 기반 메뉴 저장소"""

    def get(self, menu_id):
        return (
            Menu.objects
            .select_related('parent')
            .prefetch_related(
                Prefetch('children', queryset=Menu.objects.order_by('order'))
            )
            .filter(pk=menu_id)
            .first()
        )

    def find_all(self):
        return list(Menu.objects.order_by('depth', 'order'))

    def find_by_parent(self, parent_id):
        # parent_id=None 은 IS NULL 조건으로 변환된다
        return list(Menu.objects.filter(parent_id=parent_id).order_by('order'))

    def max_order(self, parent_id):
        return (
            Menu.objects
            .filter(parent_id=parent_id)
            .aggregate(max_order=Max('order'))['max_order']
        )

    def insert(self, menu):
        menu.save(force_insert=True)
        return menu

    def update_fields(self, menu, fields):
        # auto_now 필드는 update_fields 에 포함되어야 갱신된다
        menu.save(update_fields=[*fields, 'updated_at'])
        return menu

    def delete(self, menu):
        menu.delete()

    def atomic(self):
        return transaction.atomic()
