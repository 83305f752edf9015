import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Menu',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255, verbose_name='메뉴명')),
                ('url', models.CharField(blank=True, max_length=500, null=True, verbose_name='URL')),
                ('icon', models.CharField(blank=True, max_length=100, null=True, verbose_name='아이콘')),
                ('order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('depth', models.PositiveIntegerField(default=0, verbose_name='깊이')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='생성일시')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='수정일시')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='menus.menu', verbose_name='상위 메뉴')),
            ],
            options={
                'verbose_name': '메뉴',
                'verbose_name_plural': '메뉴',
                'db_table': 'menus',
                'ordering': ['depth', 'order'],
                'indexes': [models.Index(fields=['parent', 'order'], name='menus_parent_order_idx')],
            },
        ),
    ]
