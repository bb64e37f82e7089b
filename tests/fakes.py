from __future__ import annotations

import itertools
import math
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

from posts.domain import CommentRecord, Image, PostRecord, UserRef
from posts.store import PostStore

EARTH_RADIUS_METERS = 6371008.8


def great_circle_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


class InMemoryPostStore(PostStore):
    """Dict-backed store with the same ordering rules as the ORM store."""

    def __init__(self, users: list[UserRef] | None = None) -> None:
        self.users = {u.id: u for u in (users or [])}
        self.posts: dict[int, PostRecord] = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _copy(self, post: PostRecord) -> PostRecord:
        return replace(post, upvotes=list(post.upvotes), likes=list(post.likes), comments=list(post.comments))

    def list_posts(self, filters, page):
        posts = list(self.posts.values())
        if filters.category:
            posts = [p for p in posts if p.category == filters.category]
        if filters.status:
            posts = [p for p in posts if p.status == filters.status]
        posts.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        if filters.near is not None:
            near = filters.near
            ranked = []
            for p in posts:
                d = great_circle_meters(near.latitude, near.longitude, p.location.latitude, p.location.longitude)
                if d <= near.radius_meters:
                    ranked.append((d, p))
            ranked.sort(key=lambda item: item[0])
            posts = [p for _, p in ranked]
        return [self._copy(p) for p in posts[page.offset:page.offset + page.limit]]

    def list_by_author(self, author_id):
        posts = [p for p in self.posts.values() if p.author.id == author_id]
        posts.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return [self._copy(p) for p in posts]

    def get(self, post_id):
        post = self.posts.get(post_id)
        return self._copy(post) if post is not None else None

    def get_user(self, user_id):
        return self.users.get(user_id)

    def create(self, author_id, title, description, category, location, media):
        now = self._tick()
        post = PostRecord(
            id=next(self._ids),
            title=title,
            description=description,
            category=category,
            location=location,
            author=self.users[author_id],
            media=media,
            created_at=now,
            updated_at=now,
        )
        self.posts[post.id] = post
        return self._copy(post)

    def update(self, post_id, status=None, assigned_to=None):
        post = self.posts[post_id]
        if status is not None:
            post.status = status
        if assigned_to is not None:
            post.assigned_to = self.users[assigned_to]
        post.updated_at = self._tick()
        return self._copy(post)

    def add_comment(self, post_id, user_id, text):
        post = self.posts[post_id]
        comment = CommentRecord(
            id=len(post.comments) + 1,
            user=self.users[user_id],
            text=text,
            created_at=self._tick(),
        )
        post.comments.append(comment)
        return list(post.comments)

    def add_member(self, post_id, relation, user_id):
        members = getattr(self.posts[post_id], relation)
        if user_id not in members:
            members.append(user_id)
        return len(members)

    def remove_member(self, post_id, relation, user_id):
        members = getattr(self.posts[post_id], relation)
        if user_id in members:
            members.remove(user_id)
        return len(members)


class FakeMediaStore:
    def __init__(self) -> None:
        self.saved: list[Any] = []

    def save(self, upload):
        self.saved.append(upload)
        return Image(f"/uploads/{len(self.saved)}.png")


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[tuple[PostRecord, str, int]] = []

    def status_changed(self, post, previous_status, updated_by):
        self.events.append((post, previous_status, updated_by))
