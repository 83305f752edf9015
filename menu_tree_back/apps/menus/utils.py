from .serializers import MenuSerializer


def build_menu_tree(menus):
    """
    평면 메뉴 목록을 중첩 트리로 변환

    각 노드는 MenuSerializer 와 같은 형태(camelCase) + children.
    menus 는 (depth, order) 순으로 정렬되어 있어야 형제 순서가 유지된다.
    부모가 목록에 없는 메뉴는 루트에서 도달할 수 없으므로 결과에서 빠진다.
    """
    menus = list(menus)
    menu_map = {}
    children_map = {}

    # 모든 메뉴 노드 생성 + parent -> children 인덱스
    for menu, data in zip(menus, MenuSerializer(menus, many=True).data):
        node = dict(data)
        node["children"] = []
        menu_map[menu.id] = node
        children_map.setdefault(menu.parent_id, []).append(menu.id)

    # 루트부터 내려가며 연결 (재귀 대신 스택 사용)
    tree = [menu_map[menu_id] for menu_id in children_map.get(None, [])]
    stack = list(children_map.get(None, []))
    while stack:
        menu_id = stack.pop()
        node = menu_map[menu_id]
        for child_id in children_map.get(menu_id, []):
            node["children"].append(menu_map[child_id])
            stack.append(child_id)

    return tree
