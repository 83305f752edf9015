from django.core.management.base import BaseCommand

from apps.menus.services import MenuTreeService


class Command(BaseCommand):
    help = 'Check menu tree consistency (depth, dangling parents, cycles)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Recalculate depth for every menu reachable from the roots',
        )

    def handle(self, *args, **options):
        service = MenuTreeService()

        self.stdout.write("=== Menu Tree Check ===")
        issues = service.check_tree()

        if not issues:
            self.stdout.write(self.style.SUCCESS("No issues found"))
        else:
            for issue in issues:
                self.stdout.write(f"  [{issue['type']}] {issue['menu_id']}: {issue['message']}")
            self.stdout.write(self.style.WARNING(f"Issues: {len(issues)}"))

        if options['fix']:
            fixed = service.rebuild_depths()
            self.stdout.write(self.style.SUCCESS(f"Depth fixed: {fixed}"))
