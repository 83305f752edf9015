import logging
import uuid
from contextlib import nullcontext
from typing import Optional

from django.conf import settings

from utils.exceptions import (
    InvalidOperationException,
    ResourceNotFoundException,
    ValidationException,
)
from .models import Menu, MAX_ORDER
from .repositories import MenuRepository, MenuRepositoryProtocol
from .utils import build_menu_tree

logger = logging.getLogger(__name__)

# update() 에서 반영 가능한 필드
UPDATABLE_FIELDS = ('name', 'url', 'icon', 'order', 'parent_id')


class MenuTreeService:
    """
    메뉴 트리 관리 비즈니스 로직

    생성/수정/삭제/이동/순서 변경 시 parent, depth, order 값을 일관되게 유지한다.
    - depth: 최상위 0, 그 외 parent.depth + 1 (하위 트리 전체에 전파)
    - order: 같은 parent 를 가진 형제 사이의 정렬 키
    - 자기 자신 또는 하위 메뉴를 부모로 지정하는 작업은 거부 (순환 방지)

    Args:
        repository: 저장소 (기본값: Django ORM 저장소)
        atomic: 여러 건을 쓰는 작업을 하나의 트랜잭션으로 묶을지 여부
        clamp_reorder: reorder 시 new_order 를 형제 범위로 제한할지 여부
    """

    def __init__(
        self,
        repository: Optional[MenuRepositoryProtocol] = None,
        atomic: Optional[bool] = None,
        clamp_reorder: Optional[bool] = None,
    ):
        options = getattr(settings, 'MENU_TREE', {})
        self.repository = repository or MenuRepository()
        self.atomic = options.get('ATOMIC_OPERATIONS', True) if atomic is None else atomic
        self.clamp_reorder = (
            options.get('CLAMP_REORDER', True) if clamp_reorder is None else clamp_reorder
        )

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def find_all(self):
        """전체 메뉴를 (depth, order) 순으로 읽어 중첩 트리로 반환"""
        return build_menu_tree(self.repository.find_all())

    def find_one(self, menu_id):
        """메뉴 상세 조회 (parent, children 포함)"""
        return self._get_or_404(menu_id)

    # ------------------------------------------------------------------
    # 변경
    # ------------------------------------------------------------------
    def create(self, data):
        """
        메뉴 생성

        Args:
            data: name, url, icon, order, parent_id

        Raises:
            ResourceNotFoundException: parent_id 에 해당하는 메뉴가 없는 경우
        """
        parent_id = self._to_uuid(data.get('parent_id'), 'parentId')
        parent = self._get_parent_or_404(parent_id) if parent_id else None

        with self._transaction():
            order = data.get('order')
            if order is None:
                order = self.get_next_order(parent_id)

            menu = Menu(
                name=data.get('name'),
                url=data.get('url'),
                icon=data.get('icon'),
                order=order,
                parent_id=parent_id,
                depth=parent.depth + 1 if parent else 0,
            )
            self.repository.insert(menu)

        logger.info(
            f"Menu created: {menu.id} '{menu.name}' "
            f"(parent={parent_id}, order={menu.order}, depth={menu.depth})"
        )
        return menu

    def update(self, menu_id, data):
        """
        메뉴 수정

        parent_id 가 포함되어 있으면 부모 검증 후 depth 를 다시 계산해
        하위 메뉴까지 전파한다.
        """
        menu = self._get_or_404(menu_id)
        changes = {field: value for field, value in data.items() if field in UPDATABLE_FIELDS}

        parent_changed = 'parent_id' in changes
        if parent_changed:
            changes['parent_id'] = self._to_uuid(changes['parent_id'], 'parentId')
            self._validate_new_parent(menu.id, changes['parent_id'])

        with self._transaction():
            for field, value in changes.items():
                setattr(menu, field, value)
            if changes:
                self.repository.update_fields(menu, list(changes))

            if parent_changed:
                new_depth = self.calculate_depth(changes['parent_id'])
                self.update_depth(menu.id, new_depth)

        logger.info(f"Menu updated: {menu.id} fields={sorted(changes)}")
        return self.find_one(menu.id)

    def remove(self, menu_id):
        """메뉴 삭제 (하위 메뉴는 CASCADE 로 함께 삭제)"""
        menu = self._get_or_404(menu_id)
        with self._transaction():
            self.repository.delete(menu)
        logger.info(f"Menu removed: {menu.id} '{menu.name}' (with descendants)")

    def move(self, menu_id, new_parent_id=None):
        """
        메뉴를 다른 부모 아래로 이동 (None 이면 최상위)

        새 형제 목록의 마지막 순서를 부여하고 depth 를 하위 트리까지 갱신한다.
        """
        menu = self._get_or_404(menu_id)
        new_parent_id = self._to_uuid(new_parent_id, 'newParentId')
        self._validate_new_parent(menu.id, new_parent_id)

        with self._transaction():
            menu.parent_id = new_parent_id
            menu.order = self.get_next_order(new_parent_id)
            self.repository.update_fields(menu, ['parent_id', 'order'])

            new_depth = self.calculate_depth(new_parent_id)
            self.update_depth(menu.id, new_depth)

        logger.info(f"Menu moved: {menu.id} -> parent={new_parent_id} (order={menu.order})")
        return self.find_one(menu.id)

    def reorder(self, menu_id, new_order):
        """
        같은 레벨 안에서 순서 변경

        - 아래로 이동 (old < new): old < order <= new 인 형제는 order - 1
        - 위로 이동 (old > new): new <= order < old 인 형제는 order + 1
        """
        menu = self._get_or_404(menu_id)
        if new_order is None or not 0 <= new_order <= MAX_ORDER:
            raise ValidationException(
                message=f'순서는 0 이상 {MAX_ORDER} 이하의 정수여야 합니다.',
                field='newOrder'
            )

        siblings = self.repository.find_by_parent(menu.parent_id)
        old_order = menu.order

        if self.clamp_reorder and siblings:
            new_order = min(new_order, max(sibling.order for sibling in siblings))

        with self._transaction():
            for sibling in siblings:
                previous = sibling.order
                if sibling.id == menu.id:
                    sibling.order = new_order
                elif old_order < new_order:
                    if old_order < sibling.order <= new_order:
                        sibling.order -= 1
                elif new_order <= sibling.order < old_order:
                    sibling.order += 1

                if sibling.order != previous:
                    self.repository.update_fields(sibling, ['order'])

        logger.info(f"Menu reordered: {menu.id} {old_order} -> {new_order}")
        return self.find_one(menu.id)

    # ------------------------------------------------------------------
    # 트리 유틸
    # ------------------------------------------------------------------
    def calculate_depth(self, parent_id):
        if not parent_id:
            return 0
        parent = self.repository.get(parent_id)
        return parent.depth + 1 if parent else 0

    def get_next_order(self, parent_id):
        """형제 중 가장 큰 order + 1 (형제가 없으면 0)"""
        max_order = self.repository.max_order(parent_id)
        return 0 if max_order is None else max_order + 1

    def is_descendant(self, ancestor_id, candidate_id):
        """candidate 에서 부모 방향으로 올라가며 ancestor 를 만나는지 확인"""
        current = self.repository.get(candidate_id)
        visited = set()

        while current is not None and current.parent_id is not None:
            if current.parent_id == ancestor_id:
                return True
            # 이미 순환이 있는 데이터에서 무한 루프 방지
            if current.parent_id in visited:
                break
            visited.add(current.parent_id)
            current = self.repository.get(current.parent_id)

        return False

    def update_depth(self, menu_id, new_depth):
        """메뉴의 depth 를 변경하고 변화량을 하위 트리 전체에 적용"""
        menu = self.repository.get(menu_id)
        if menu is None:
            return

        delta = new_depth - menu.depth
        menu.depth = new_depth
        self.repository.update_fields(menu, ['depth'])

        if delta == 0:
            return

        stack = [menu.id]
        visited = {menu.id}
        updated = 0
        while stack:
            parent_id = stack.pop()
            for child in self.repository.find_by_parent(parent_id):
                if child.id in visited:
                    continue
                visited.add(child.id)
                child.depth += delta
                self.repository.update_fields(child, ['depth'])
                updated += 1
                stack.append(child.id)

        logger.debug(f"Depth cascade: {menu_id} depth={new_depth} delta={delta} descendants={updated}")

    def check_tree(self):
        """
        트리 정합성 검사 (읽기 전용)

        Returns:
            list[dict]: menu_id, type('depth' | 'orphan' | 'cycle'), message
        """
        menus = self.repository.find_all()
        by_id = {menu.id: menu for menu in menus}
        issues = []

        for menu in menus:
            if menu.is_root:
                if menu.depth != 0:
                    issues.append(self._issue(menu, 'depth', f'최상위 메뉴의 depth 가 {menu.depth} 입니다. (기대값 0)'))
                continue

            parent = by_id.get(menu.parent_id)
            if parent is None:
                issues.append(self._issue(menu, 'orphan', f'상위 메뉴 {menu.parent_id} 가 존재하지 않습니다.'))
            elif menu.depth != parent.depth + 1:
                issues.append(self._issue(
                    menu, 'depth', f'depth 가 {menu.depth} 입니다. (기대값 {parent.depth + 1})'
                ))

        for menu in menus:
            seen = {menu.id}
            current = menu
            while current.parent_id is not None and current.parent_id in by_id:
                if current.parent_id in seen:
                    if current.parent_id == menu.id:
                        issues.append(self._issue(menu, 'cycle', '자기 자신이 상위 경로에 포함되어 있습니다.'))
                    break
                seen.add(current.parent_id)
                current = by_id[current.parent_id]

        return issues

    def rebuild_depths(self):
        """루트부터 depth 를 다시 계산해 달라진 메뉴만 저장. 수정한 건수를 반환."""
        children_map = {}
        for menu in self.repository.find_all():
            children_map.setdefault(menu.parent_id, []).append(menu)

        fixed = 0
        stack = [(menu, 0) for menu in children_map.get(None, [])]
        with self._transaction():
            while stack:
                menu, depth = stack.pop()
                if menu.depth != depth:
                    menu.depth = depth
                    self.repository.update_fields(menu, ['depth'])
                    fixed += 1
                stack.extend((child, depth + 1) for child in children_map.get(menu.id, []))

        if fixed:
            logger.info(f"Depth rebuild: {fixed} menus fixed")
        return fixed

    # ------------------------------------------------------------------
    # 내부 헬퍼
    # ------------------------------------------------------------------
    def _transaction(self):
        return self.repository.atomic() if self.atomic else nullcontext()

    def _get_or_404(self, menu_id):
        try:
            menu_uuid = self._to_uuid(menu_id, 'id')
        except ValidationException:
            menu_uuid = None

        menu = self.repository.get(menu_uuid) if menu_uuid else None
        if menu is None:
            raise ResourceNotFoundException(
                message=f'ID가 {menu_id}인 메뉴를 찾을 수 없습니다.',
                detail={'id': str(menu_id)}
            )
        return menu

    def _get_parent_or_404(self, parent_id):
        parent = self.repository.get(parent_id)
        if parent is None:
            raise ResourceNotFoundException(
                message=f'ID가 {parent_id}인 상위 메뉴를 찾을 수 없습니다.',
                detail={'id': str(parent_id)}
            )
        return parent

    def _validate_new_parent(self, menu_id, new_parent_id):
        """자기 자신/존재하지 않는 메뉴/하위 메뉴를 부모로 지정하는지 검사"""
        if new_parent_id == menu_id:
            raise InvalidOperationException(message='메뉴는 자기 자신을 상위 메뉴로 지정할 수 없습니다.')

        if new_parent_id is None:
            return None

        parent = self._get_parent_or_404(new_parent_id)
        if self.is_descendant(menu_id, new_parent_id):
            raise InvalidOperationException(message='메뉴를 자신의 하위 메뉴 아래로 이동할 수 없습니다.')
        return parent

    @staticmethod
    def _to_uuid(value, field):
        if value is None or value == '':
            return None
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except ValueError:
            raise ValidationException(
                message=f'올바른 UUID 형식이 아닙니다: {value}',
                field=field
            )

    @staticmethod
    def _issue(menu, issue_type, message):
        return {'menu_id': str(menu.id), 'type': issue_type, 'message': message}
