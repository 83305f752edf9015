from django.core.management.base import BaseCommand

from apps.menus.repositories import MenuRepository
from apps.menus.services import MenuTreeService


# (name, url, icon, children)
SAMPLE_MENUS = [
    ('Dashboard', '/dashboard', 'dashboard', []),
    ('Content', None, 'folder', [
        ('Posts', '/content/posts', 'article', [
            ('Drafts', '/content/posts/drafts', 'edit_note', []),
            ('Published', '/content/posts/published', 'public', []),
        ]),
        ('Pages', '/content/pages', 'description', []),
        ('Media', '/content/media', 'perm_media', []),
    ]),
    ('Users', None, 'group', [
        ('User List', '/users', 'person', []),
        ('Roles', '/users/roles', 'admin_panel_settings', []),
    ]),
    ('Settings', '/settings', 'settings', []),
]


class Command(BaseCommand):
    help = 'Create a sample menu tree'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete all existing menus before seeding',
        )

    def handle(self, *args, **options):
        repository = MenuRepository()
        service = MenuTreeService(repository=repository)

        self.stdout.write("=" * 60)
        self.stdout.write("Sample Menu Tree")
        self.stdout.write("=" * 60)

        if options['reset']:
            self.stdout.write("\n[Step 1] Deleting existing menus...")
            roots = repository.find_by_parent(None)
            for root in roots:
                service.remove(root.id)
            self.stdout.write(f"  Deleted roots: {len(roots)}")

        self.stdout.write("\n[Step 2] Creating menus...")

        created = 0
        # (parent_id, items) 단위로 위에서부터 생성
        stack = [(None, SAMPLE_MENUS)]
        while stack:
            parent_id, items = stack.pop()
            for name, url, icon, children in items:
                menu = service.create({
                    'name': name,
                    'url': url,
                    'icon': icon,
                    'parent_id': parent_id,
                })
                created += 1
                self.stdout.write(f"  {'  ' * menu.depth}{menu.name} (order={menu.order}, depth={menu.depth})")
                if children:
                    stack.append((menu.id, children))

        self.stdout.write(self.style.SUCCESS(f"\nCreated menus: {created}"))
