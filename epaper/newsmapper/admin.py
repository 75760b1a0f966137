from django.contrib import admin
from .models import MappedArea, Newspaper


class MappedAreaInline(admin.TabularInline):
    model = MappedArea
    fields = ('page_number', 'headline', 'category', 'x', 'y', 'width', 'height')
    readonly_fields = fields
    extra = 0
    can_delete = False


# Define an admin class for the Newspaper model
class NewspaperAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'date', 'page_count', 'is_published', 'view_count', 'uploaded_at')
    search_fields = ('title',)
    list_filter = ('is_published', 'date')
    exclude = ('cover_image_url',)
    inlines = [MappedAreaInline]


# Mapped areas are append-only, so the admin only lists them
class MappedAreaAdmin(admin.ModelAdmin):
    list_display = ('id', 'newspaper', 'page_number', 'headline', 'category')
    search_fields = ('headline',)
    list_filter = ('category', 'newspaper')
    exclude = ('extracted_image_url',)

    def has_change_permission(self, request, obj=None):
        return False


admin.site.register(Newspaper, NewspaperAdmin)
admin.site.register(MappedArea, MappedAreaAdmin)
