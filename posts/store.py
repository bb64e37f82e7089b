"""
Persistence for posts.

``PostStore`` is what the service depends on. ``DjangoPostStore`` backs it
with GeoDjango and resolves author, assignee and comment-author references into
domain records as an explicit step (``to_record``).
"""
import abc
from typing import List, Optional

from django.contrib.auth import get_user_model
from django.contrib.gis.db.models.functions import Distance
from django.contrib.gis.geos import Point
from django.contrib.gis.measure import D
from django.db import connection
from django.db.models import Prefetch, Q

from .domain import (
    LIKES, UPVOTES, CommentRecord, GeoPoint, Media, Page, PostFilters, PostRecord, UserRef,
)
from .models import Comment, Post

User = get_user_model()


class PostStore(abc.ABC):

    @abc.abstractmethod
    def list_posts(self, filters: PostFilters, page: Page) -> List[PostRecord]:
        """Newest-first page; nearest-first when ``filters.near`` is set."""

    @abc.abstractmethod
    def list_by_author(self, author_id: int) -> List[PostRecord]:
        ...

    @abc.abstractmethod
    def get(self, post_id: int) -> Optional[PostRecord]:
        ...

    @abc.abstractmethod
    def get_user(self, user_id: int) -> Optional[UserRef]:
        ...

    @abc.abstractmethod
    def create(self, author_id: int, title: str, description: str, category: str,
               location: GeoPoint, media: Optional[Media]) -> PostRecord:
        ...

    @abc.abstractmethod
    def update(self, post_id: int, status: Optional[str] = None,
               assigned_to: Optional[int] = None) -> PostRecord:
        ...

    @abc.abstractmethod
    def add_comment(self, post_id: int, user_id: int, text: str) -> List[CommentRecord]:
        ...

    @abc.abstractmethod
    def add_member(self, post_id: int, relation: str, user_id: int) -> int:
        """Add ``user_id`` to the likes/upvotes set, return the new size."""

    @abc.abstractmethod
    def remove_member(self, post_id: int, relation: str, user_id: int) -> int:
        """Remove ``user_id`` from the likes/upvotes set, return the new size."""


def within_radius(point, radius_meters):
    """Lookup matching posts within ``radius_meters`` of ``point``."""
    distance = D(m=radius_meters)
    if connection.ops.geography:
        # PostGIS: ST_DWithin on geography, served by the GiST index
        return Q(location__dwithin=(point, distance))
    # SpatiaLite only takes degrees for dwithin on geodetic fields
    return Q(location__distance_lte=(point, distance))


def user_ref(user) -> Optional[UserRef]:
    if user is None:
        return None
    return UserRef(id=user.pk, name=user.display_name, department=user.department)


def comment_record(comment: Comment) -> CommentRecord:
    return CommentRecord(
        id=comment.pk,
        user=user_ref(comment.user),
        text=comment.text,
        created_at=comment.created_at,
    )


def to_record(post: Post) -> PostRecord:
    """Build a PostRecord from a post loaded through ``DjangoPostStore.queryset``."""
    return PostRecord(
        id=post.pk,
        title=post.title,
        description=post.description,
        category=post.category,
        location=GeoPoint(latitude=post.latitude, longitude=post.longitude, address=post.address),
        author=user_ref(post.author),
        status=post.status,
        media=post.media,
        assigned_to=user_ref(post.assigned_to),
        upvotes=[u.pk for u in post.upvotes.all()],
        likes=[u.pk for u in post.likes.all()],
        shares=post.shares,
        comments=[comment_record(c) for c in post.comments.all()],
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


class DjangoPostStore(PostStore):

    def queryset(self):
        return (
            Post.objects
            .select_related('author', 'assigned_to')
            .prefetch_related(
                Prefetch('upvotes', queryset=User.objects.only('id')),
                Prefetch('likes', queryset=User.objects.only('id')),
                Prefetch('comments', queryset=Comment.objects.select_related('user')),
            )
        )

    def list_posts(self, filters, page):
        queryset = self.queryset()

        if filters.category:
            queryset = queryset.filter(category=filters.category)
        if filters.status:
            queryset = queryset.filter(status=filters.status)

        if filters.near is None:
            posts = queryset.order_by('-created_at', '-id')[page.offset:page.offset + page.limit]
            return [to_record(p) for p in posts]

        near = filters.near
        point = Point(near.longitude, near.latitude, srid=4326)
        posts = (
            queryset
            .filter(within_radius(point, near.radius_meters))
            .annotate(distance=Distance('location', point))
            .order_by('distance', '-created_at', '-id')
        )[page.offset:page.offset + page.limit]
        return [to_record(p) for p in posts]

    def list_by_author(self, author_id):
        posts = self.queryset().filter(author_id=author_id).order_by('-created_at', '-id')
        return [to_record(p) for p in posts]

    def get(self, post_id):
        post = self.queryset().filter(pk=post_id).first()
        return to_record(post) if post is not None else None

    def get_user(self, user_id):
        return user_ref(User.objects.filter(pk=user_id).first())

    def create(self, author_id, title, description, category, location, media):
        post = Post(
            title=title,
            description=description,
            category=category,
            address=location.address,
            author_id=author_id,
        )
        post.set_coordinates(location.latitude, location.longitude)
        post.media = media
        post.save()
        return self.get(post.pk)

    def update(self, post_id, status=None, assigned_to=None):
        post = Post.objects.get(pk=post_id)
        update_fields = ['updated_at']
        if status is not None:
            post.status = status
            update_fields.append('status')
        if assigned_to is not None:
            post.assigned_to_id = assigned_to
            update_fields.append('assigned_to')
        post.save(update_fields=update_fields)
        return self.get(post_id)

    def add_comment(self, post_id, user_id, text):
        Comment.objects.create(post_id=post_id, user_id=user_id, text=text)
        comments = Comment.objects.filter(post_id=post_id).select_related('user')
        return [comment_record(c) for c in comments]

    def _relation(self, post_id, relation):
        if relation not in (LIKES, UPVOTES):
            raise ValueError(f"Unknown relation: {relation}")
        return getattr(Post.objects.get(pk=post_id), relation)

    def add_member(self, post_id, relation, user_id):
        members = self._relation(post_id, relation)
        members.add(user_id)
        return members.count()

    def remove_member(self, post_id, relation, user_id):
        members = self._relation(post_id, relation)
        members.remove(user_id)
        return members.count()
