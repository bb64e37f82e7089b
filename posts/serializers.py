from django.conf import settings
from rest_framework import serializers

from .domain import CATEGORIES, STATUSES, Page, PostFilters, Proximity
from .media import validate_media_file

# Keeps (page - 1) * limit inside a 64-bit SQL OFFSET
MAX_PAGE = 10 ** 9


class UserRefSerializer(serializers.Serializer):
    """Author / commenter as shown on post cards"""
    id = serializers.IntegerField()
    name = serializers.CharField()


class AssigneeSerializer(UserRefSerializer):
    department = serializers.CharField()


class CommentSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user = UserRefSerializer()
    text = serializers.CharField()
    createdAt = serializers.DateTimeField(source='created_at')


class PostSerializer(serializers.Serializer):
    """Renders a PostRecord in the shape the web client consumes"""
    id = serializers.IntegerField()
    title = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    location = serializers.SerializerMethodField()
    imageUrl = serializers.CharField(source='image_url', allow_null=True)
    videoUrl = serializers.CharField(source='video_url', allow_null=True)
    status = serializers.CharField()
    author = UserRefSerializer()
    assignedTo = AssigneeSerializer(source='assigned_to', allow_null=True)
    upvotes = serializers.ListField(child=serializers.IntegerField())
    likes = serializers.ListField(child=serializers.IntegerField())
    shares = serializers.IntegerField()
    comments = CommentSerializer(many=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    def get_location(self, obj):
        # GeoJSON order: [lng, lat]
        return {
            'type': 'Point',
            'coordinates': [obj.location.longitude, obj.location.latitude],
            'address': obj.location.address,
        }


class PostListQuerySerializer(serializers.Serializer):
    """Query-string filters for GET /posts"""
    category = serializers.ChoiceField(choices=CATEGORIES, required=False)
    status = serializers.ChoiceField(choices=STATUSES, required=False)
    near = serializers.CharField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1)
    page = serializers.IntegerField(required=False, min_value=1, max_value=MAX_PAGE)

    def validate_near(self, value):
        try:
            return Proximity.parse(value, default_radius=settings.CIVICFEED['DEFAULT_NEAR_RADIUS_METERS'])
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))

    def validate_limit(self, value):
        return min(value, settings.CIVICFEED['MAX_PAGE_SIZE'])

    def to_filters(self):
        data = self.validated_data
        return PostFilters(
            category=data.get('category'),
            status=data.get('status'),
            near=data.get('near'),
        )

    def to_page(self):
        data = self.validated_data
        return Page(
            limit=data.get('limit', settings.CIVICFEED['DEFAULT_PAGE_SIZE']),
            page=data.get('page', 1),
        )


class PostCreateSerializer(serializers.Serializer):
    """Multipart form for reporting an issue"""
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=CATEGORIES)
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    media = serializers.FileField(required=False, allow_null=True, validators=[validate_media_file])

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title cannot be empty.")
        return value.strip()


class OptionalIdField(serializers.IntegerField):
    """User id where an empty string, as sent by forms and JSON alike, means none."""

    def validate_empty_values(self, data):
        if data == '':
            return True, None
        return super().validate_empty_values(data)


class PostUpdateSerializer(serializers.Serializer):
    """Status / assignment changes. Blank values mean 'leave as is'."""
    status = serializers.ChoiceField(choices=STATUSES, required=False, allow_blank=True, allow_null=True)
    assignedTo = OptionalIdField(required=False, allow_null=True, min_value=1)

    def validate_status(self, value):
        return value or None


class CommentCreateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=1000)
