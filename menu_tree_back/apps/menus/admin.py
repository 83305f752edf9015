from django.contrib import admin
from .models import Menu


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    list_display = ('name', 'parent', 'depth', 'order', 'url', 'icon', 'updated_at')
    list_filter = ('depth',)
    search_fields = ('name', 'url')
    ordering = ('depth', 'parent', 'order')
    # depth 는 트리 구조에서 계산되므로 직접 수정하지 않음
    readonly_fields = ('depth', 'created_at', 'updated_at')

    fieldsets = (
        ('기본 정보', {
            'fields': ('name', 'url', 'icon')
        }),
        ('트리 위치', {
            'fields': ('parent', 'order', 'depth')
        }),
        ('메타 정보', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
