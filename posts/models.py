from django.conf import settings
from django.contrib.gis.db import models as gis_models
from django.contrib.gis.geos import Point
from django.db import models

from .domain import CATEGORIES, STATUS_IN_PROGRESS, STATUS_REPORTED, STATUS_RESOLVED, Media


class Post(models.Model):
    """
    A municipal issue reported by a citizen.
    Location is a single WGS84 point; media is one photo or one video.
    """
    CATEGORY_CHOICES = [(c, c.title()) for c in CATEGORIES]

    STATUS_CHOICES = [
        (STATUS_REPORTED, 'Reported'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_RESOLVED, 'Resolved'),
    ]

    MEDIA_CHOICES = [
        ('', 'None'),
        ('image', 'Image'),
        ('video', 'Video'),
    ]

    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)

    # Location: (lng, lat) point, geography so distances come back in meters
    location = gis_models.PointField(geography=True, srid=4326)
    address = models.CharField(max_length=255, blank=True)

    # Media: kind + url, both blank when the post has none
    media_kind = models.CharField(max_length=10, choices=MEDIA_CHOICES, blank=True, default='')
    media_url = models.CharField(max_length=500, blank=True, default='')

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_REPORTED)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='posts'
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_posts'
    )

    # Votes & social features
    upvotes = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='upvoted_posts')
    likes = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='liked_posts')
    shares = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='posts_created_idx'),
            models.Index(fields=['author', '-created_at'], name='posts_author_created_idx'),
            models.Index(fields=['category', 'status'], name='posts_category_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(media_kind='', media_url='')
                    | (~models.Q(media_kind='') & ~models.Q(media_url=''))
                ),
                name='posts_media_kind_matches_url',
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.get_category_display()}, {self.get_status_display()})"

    @property
    def latitude(self):
        return self.location.y if self.location is not None else None

    @property
    def longitude(self):
        return self.location.x if self.location is not None else None

    def set_coordinates(self, latitude, longitude):
        self.location = Point(longitude, latitude, srid=4326)

    @property
    def media(self):
        return Media.from_kind(self.media_kind, self.media_url)

    @media.setter
    def media(self, value):
        self.media_kind = value.kind if value is not None else ''
        self.media_url = value.url if value is not None else ''

    def save(self, *args, **kwargs):
        # Author is fixed at creation
        update_fields = kwargs.get('update_fields')
        if self.pk and (update_fields is None or 'author' in update_fields):
            original = Post.objects.filter(pk=self.pk).values_list('author_id', flat=True).first()
            if original is not None and original != self.author_id:
                raise ValueError("The author of a post cannot be changed")
        super().save(*args, **kwargs)


class Comment(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='comments')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='post_comments'
    )
    text = models.TextField(max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['post', 'created_at'], name='comments_post_created_idx'),
        ]

    def __str__(self):
        return f"{self.user}: {self.text[:50]}"
