from django.contrib import admin
from django.contrib.gis.admin import GISModelAdmin
from .models import Post, Comment


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    raw_id_fields = ['user']
    readonly_fields = ['created_at']


@admin.register(Post)
class PostAdmin(GISModelAdmin):
    list_display = ['title', 'category', 'status', 'author', 'assigned_to', 'created_at']
    list_filter = ['category', 'status', 'created_at']
    search_fields = ['title', 'description', 'address', 'author__username']
    date_hierarchy = 'created_at'
    raw_id_fields = ['author', 'assigned_to']
    filter_horizontal = ['upvotes', 'likes']
    inlines = [CommentInline]

    def get_readonly_fields(self, request, obj=None):
        # Author is fixed once the post exists
        if obj is not None:
            return ['author', 'created_at', 'updated_at']
        return ['created_at', 'updated_at']


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['user', 'post', 'text_preview', 'created_at']
    search_fields = ['user__username', 'text']
    date_hierarchy = 'created_at'
    raw_id_fields = ['post', 'user']

    def text_preview(self, obj):
        return obj.text[:50] + '...' if len(obj.text) > 50 else obj.text
    text_preview.short_description = 'Comment'
