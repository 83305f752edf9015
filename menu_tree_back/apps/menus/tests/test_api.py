import uuid

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from apps.menus.models import Menu
from apps.menus.repositories import MenuRepository
from apps.menus.services import MenuTreeService


class MenuModelTest(TestCase):
    """Menu 모델 / ORM 저장소 테스트"""

    def setUp(self):
        self.service = MenuTreeService(repository=MenuRepository())

    def test_menu_defaults(self):
        """기본값: order 0, depth 0, 타임스탬프 자동 설정"""
        menu = Menu.objects.create(name='Root')

        self.assertIsInstance(menu.id, uuid.UUID)
        self.assertEqual(menu.order, 0)
        self.assertEqual(menu.depth, 0)
        self.assertTrue(menu.is_root)
        self.assertIsNotNone(menu.created_at)
        self.assertIsNotNone(menu.updated_at)
        self.assertEqual(str(menu), 'Root')

    def test_cascade_delete(self):
        """상위 메뉴 삭제 시 하위 메뉴 모두 삭제"""
        root = self.service.create({'name': 'Root'})
        child = self.service.create({'name': 'Child', 'parent_id': root.id})
        self.service.create({'name': 'Grandchild', 'parent_id': child.id})

        self.service.remove(root.id)

        self.assertEqual(Menu.objects.count(), 0)

    def test_move_cascades_depth_in_database(self):
        """이동 시 하위 메뉴 depth 가 DB 에 반영"""
        a = self.service.create({'name': 'A'})
        b = self.service.create({'name': 'B', 'parent_id': a.id})
        target = self.service.create({'name': 'Target', 'parent_id': b.id})
        x = self.service.create({'name': 'X'})
        y = self.service.create({'name': 'Y', 'parent_id': x.id})
        z = self.service.create({'name': 'Z', 'parent_id': y.id})

        self.service.move(x.id, target.id)

        depths = dict(Menu.objects.values_list('name', 'depth'))
        self.assertEqual(depths['X'], 3)
        self.assertEqual(depths['Y'], 4)
        self.assertEqual(depths['Z'], 5)
        self.assertEqual(Menu.objects.get(pk=z.id).parent_id, y.id)

    def test_reorder_in_database(self):
        """순서 변경 시 형제 메뉴 순서가 DB 에 반영"""
        menus = {name: self.service.create({'name': name}) for name in ('A', 'B', 'C', 'D')}

        self.service.reorder(menus['B'].id, 3)

        orders = dict(Menu.objects.filter(parent__isnull=True).values_list('name', 'order'))
        self.assertEqual(orders, {'A': 0, 'C': 1, 'D': 2, 'B': 3})

    def test_repository_implements_protocol(self):
        from apps.menus.repositories import MenuRepositoryProtocol

        self.assertIsInstance(MenuRepository(), MenuRepositoryProtocol)


class MenuAPITest(APITestCase):
    """메뉴 API 테스트"""

    def setUp(self):
        self.list_url = '/api/menus'

    def detail_url(self, menu_id, suffix=''):
        return f'/api/menus/{menu_id}{suffix}'

    def create_menu(self, name, parent_id=None, **extra):
        data = {'name': name}
        if parent_id is not None:
            data['parentId'] = str(parent_id)
        data.update(extra)
        response = self.client.post(self.list_url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    # --- 생성 ---
    def test_create_root_menu(self):
        """메뉴 생성 → 201, camelCase 응답"""
        response = self.client.post(
            self.list_url,
            {'name': 'Dashboard', 'url': '/dashboard', 'icon': 'dashboard'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Dashboard')
        self.assertEqual(response.data['order'], 0)
        self.assertEqual(response.data['depth'], 0)
        self.assertIsNone(response.data['parentId'])
        self.assertIn('createdAt', response.data)
        self.assertIn('updatedAt', response.data)

    def test_create_with_trailing_slash(self):
        response = self.client.post('/api/menus/', {'name': 'Slash'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_create_child_menu(self):
        root = self.create_menu('Root')

        child = self.create_menu('Child', root['id'])

        self.assertEqual(child['parentId'], root['id'])
        self.assertEqual(child['depth'], 1)

    def test_create_without_name_returns_validation_error(self):
        """name 누락 → 400 ERR_101"""
        response = self.client.post(self.list_url, {'url': '/x'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        error = response.data['error']
        self.assertEqual(error['code'], 'ERR_101')
        self.assertEqual(error['field'], 'name')
        self.assertIn('name', error['fields'])
        self.assertIn('timestamp', error)

    def test_create_with_too_long_name(self):
        response = self.client.post(self.list_url, {'name': 'x' * 256}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'ERR_101')

    def test_create_with_negative_order(self):
        response = self.client.post(self.list_url, {'name': 'A', 'order': -1}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('order', response.data['error']['fields'])

    def test_create_with_invalid_parent_id(self):
        response = self.client.post(
            self.list_url, {'name': 'A', 'parentId': 'not-a-uuid'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parentId', response.data['error']['fields'])

    def test_create_with_missing_parent(self):
        """존재하지 않는 상위 메뉴 → 404 ERR_201"""
        response = self.client.post(
            self.list_url, {'name': 'A', 'parentId': str(uuid.uuid4())}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'ERR_201')
        self.assertEqual(Menu.objects.count(), 0)

    # --- 조회 ---
    def test_list_returns_nested_tree(self):
        root = self.create_menu('Root')
        child = self.create_menu('Child', root['id'])
        grandchild = self.create_menu('Grandchild', child['id'])
        self.create_menu('Second')

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([node['name'] for node in response.data], ['Root', 'Second'])
        child_node = response.data[0]['children'][0]
        self.assertEqual(child_node['id'], child['id'])
        self.assertEqual(child_node['children'][0]['id'], grandchild['id'])
        self.assertEqual(child_node['children'][0]['children'], [])

    def test_list_empty(self):
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_list_and_detail_share_node_format(self):
        """목록/상세/생성 응답의 같은 메뉴 필드가 동일"""
        created = self.create_menu('Root', url='/root', icon='home')

        node = self.client.get(self.list_url).data[0]
        detail = self.client.get(self.detail_url(created['id'])).data

        for field in ('id', 'name', 'url', 'icon', 'order', 'parentId', 'depth', 'createdAt', 'updatedAt'):
            self.assertEqual(node[field], detail[field], field)
            self.assertEqual(node[field], created[field], field)

    def test_retrieve_includes_parent_and_children(self):
        root = self.create_menu('Root')
        child = self.create_menu('Child', root['id'])
        self.create_menu('Leaf 2', child['id'])
        self.create_menu('Leaf 1', child['id'], order=5)

        response = self.client.get(self.detail_url(child['id']))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['parent']['id'], root['id'])
        self.assertEqual([c['name'] for c in response.data['children']], ['Leaf 2', 'Leaf 1'])

    def test_retrieve_root_has_null_parent(self):
        root = self.create_menu('Root')

        response = self.client.get(self.detail_url(root['id']))

        self.assertIsNone(response.data['parent'])
        self.assertEqual(response.data['children'], [])

    def test_retrieve_not_found(self):
        response = self.client.get(self.detail_url(uuid.uuid4()))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'ERR_201')

    def test_non_uuid_path_is_not_found(self):
        response = self.client.get(self.detail_url('abc'))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # --- 수정 ---
    def test_update_menu(self):
        menu = self.create_menu('Old', url='/old')

        response = self.client.put(
            self.detail_url(menu['id']), {'name': 'New', 'icon': 'star'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'New')
        self.assertEqual(response.data['icon'], 'star')
        self.assertEqual(response.data['url'], '/old')

    def test_update_parent_recalculates_depth(self):
        target = self.create_menu('Target')
        menu = self.create_menu('Menu')
        child = self.create_menu('Child', menu['id'])

        response = self.client.put(
            self.detail_url(menu['id']), {'parentId': target['id']}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['depth'], 1)
        self.assertEqual(Menu.objects.get(pk=child['id']).depth, 2)

    def test_update_self_parent(self):
        menu = self.create_menu('Menu')

        response = self.client.put(
            self.detail_url(menu['id']), {'parentId': menu['id']}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'ERR_102')

    def test_update_not_found(self):
        response = self.client.put(self.detail_url(uuid.uuid4()), {'name': 'x'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # --- 삭제 ---
    def test_delete_cascades(self):
        root = self.create_menu('Root')
        child = self.create_menu('Child', root['id'])
        self.create_menu('Grandchild', child['id'])
        keep = self.create_menu('Keep')

        response = self.client.delete(self.detail_url(root['id']))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(list(Menu.objects.values_list('name', flat=True)), ['Keep'])
        self.assertEqual(str(Menu.objects.get().id), keep['id'])

    def test_delete_not_found(self):
        response = self.client.delete(self.detail_url(uuid.uuid4()))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # --- 이동 ---
    def test_move_menu(self):
        target = self.create_menu('Target')
        self.create_menu('Existing', target['id'])
        menu = self.create_menu('Menu')
        child = self.create_menu('Child', menu['id'])

        response = self.client.patch(
            self.detail_url(menu['id'], '/move'), {'newParentId': target['id']}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['parentId'], target['id'])
        self.assertEqual(response.data['depth'], 1)
        self.assertEqual(response.data['order'], 1)
        self.assertEqual(response.data['children'][0]['depth'], 2)
        self.assertEqual(Menu.objects.get(pk=child['id']).depth, 2)

    def test_move_to_root(self):
        root = self.create_menu('Root')
        child = self.create_menu('Child', root['id'])

        response = self.client.patch(self.detail_url(child['id'], '/move/'), {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['parentId'])
        self.assertEqual(response.data['depth'], 0)
        self.assertEqual(response.data['order'], 1)

    def test_move_to_self(self):
        menu = self.create_menu('Menu')

        response = self.client.patch(
            self.detail_url(menu['id'], '/move'), {'newParentId': menu['id']}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'ERR_102')

    def test_move_to_descendant_leaves_tree_unchanged(self):
        root = self.create_menu('Root')
        child = self.create_menu('Child', root['id'])
        grandchild = self.create_menu('Grandchild', child['id'])

        response = self.client.patch(
            self.detail_url(root['id'], '/move'), {'newParentId': grandchild['id']}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'ERR_102')
        self.assertIsNone(Menu.objects.get(pk=root['id']).parent_id)
        self.assertEqual(Menu.objects.get(pk=grandchild['id']).depth, 2)

    def test_move_to_missing_parent(self):
        menu = self.create_menu('Menu')

        response = self.client.patch(
            self.detail_url(menu['id'], '/move'), {'newParentId': str(uuid.uuid4())}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # --- 순서 변경 ---
    def test_reorder_menu(self):
        menus = {name: self.create_menu(name) for name in ('A', 'B', 'C', 'D')}

        response = self.client.patch(
            self.detail_url(menus['D']['id'], '/reorder'), {'newOrder': 0}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order'], 0)
        orders = dict(Menu.objects.values_list('name', 'order'))
        self.assertEqual(orders, {'D': 0, 'A': 1, 'B': 2, 'C': 3})

    def test_reorder_requires_new_order(self):
        menu = self.create_menu('A')

        response = self.client.patch(self.detail_url(menu['id'], '/reorder'), {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['field'], 'newOrder')

    def test_reorder_negative_order(self):
        menu = self.create_menu('A')

        response = self.client.patch(
            self.detail_url(menu['id'], '/reorder'), {'newOrder': -1}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'ERR_101')

    def test_reorder_order_above_column_range(self):
        """DB 컬럼 범위를 넘는 newOrder → 400 (clamp 설정과 무관)"""
        menu = self.create_menu('A')

        with self.settings(MENU_TREE={'ATOMIC_OPERATIONS': True, 'CLAMP_REORDER': False}):
            response = self.client.patch(
                self.detail_url(menu['id'], '/reorder'), {'newOrder': 2 ** 70}, format='json'
            )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'ERR_101')
        self.assertEqual(response.data['error']['field'], 'newOrder')
        self.assertEqual(Menu.objects.get(pk=menu['id']).order, 0)

    def test_create_order_above_column_range(self):
        response = self.client.post(self.list_url, {'name': 'A', 'order': 2 ** 70}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['field'], 'order')
        self.assertEqual(Menu.objects.count(), 0)

    def test_create_order_at_column_limit(self):
        menu = self.create_menu('A', order=2147483647)

        self.assertEqual(menu['order'], 2147483647)


class HealthCheckTest(APITestCase):
    """헬스 체크 테스트"""

    def test_health_check(self):
        Menu.objects.create(name='Root')

        response = self.client.get('/health/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'healthy')
        self.assertEqual(response.data['database'], 'connected')
        self.assertEqual(response.data['menus'], 1)
        self.assertEqual(response.data['treeIssues'], 0)

    def test_health_check_reports_tree_issues(self):
        """depth 가 어긋난 메뉴가 있으면 degraded"""
        root = Menu.objects.create(name='Root')
        Menu.objects.create(name='Child', parent=root, depth=3)

        response = self.client.get('/health/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'degraded')
        self.assertEqual(response.data['menus'], 2)
        self.assertEqual(response.data['treeIssues'], 1)
