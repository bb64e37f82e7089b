"""
Post resource operations.

``PostService`` holds the rules (who may update, toggle semantics, required
fields); storage, media and notifications are injected collaborators.
"""
import logging

from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from .domain import CATEGORIES, LIKES, STATUSES, UPVOTES, Caller, GeoPoint, ToggleResult

logger = logging.getLogger(__name__)

POST_NOT_FOUND = 'Post not found'


class PostService:

    def __init__(self, store, media_store=None, notifier=None):
        self.store = store
        self.media_store = media_store
        self.notifier = notifier

    def _get_or_404(self, post_id):
        post = self.store.get(post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)
        return post

    def list(self, filters, page):
        return self.store.list_posts(filters, page)

    def list_by_user(self, user_id):
        return self.store.list_by_author(user_id)

    def get(self, post_id):
        return self._get_or_404(post_id)

    def create(self, author_id, title, description, category, latitude, longitude,
               address='', media_file=None):
        errors = {}
        for name, value in (('title', title), ('description', description)):
            if not value or not str(value).strip():
                errors[name] = ['This field is required.']
        if category not in CATEGORIES:
            errors['category'] = [f'"{category}" is not a valid choice.']
        if latitude is None or not -90 <= latitude <= 90:
            errors['lat'] = ['A latitude between -90 and 90 is required.']
        if longitude is None or not -180 <= longitude <= 180:
            errors['lng'] = ['A longitude between -180 and 180 is required.']
        if errors:
            raise ValidationError(errors)

        # Upload first; a failed insert below leaves the file behind
        media = None
        if media_file is not None:
            media = self.media_store.save(media_file)

        post = self.store.create(
            author_id=author_id,
            title=title.strip(),
            description=description,
            category=category,
            location=GeoPoint(latitude=latitude, longitude=longitude, address=address or ''),
            media=media,
        )
        logger.info("User %s reported post %s (%s)", author_id, post.id, category)
        return post

    def update_status_or_assignment(self, post_id, caller: Caller, status=None, assigned_to=None):
        post = self._get_or_404(post_id)

        # Only author or municipal workers can update
        if post.author.id != caller.user_id and not caller.is_municipal:
            raise PermissionDenied('Not authorized')

        if status is not None and status not in STATUSES:
            raise ValidationError({'status': [f'"{status}" is not a valid choice.']})
        if assigned_to is not None and self.store.get_user(assigned_to) is None:
            raise ValidationError({'assignedTo': ['User not found.']})

        updated = self.store.update(post_id, status=status, assigned_to=assigned_to)

        if status is not None and status != post.status and self.notifier is not None:
            self.notifier.status_changed(updated, previous_status=post.status, updated_by=caller.user_id)
        return updated

    def add_comment(self, post_id, user_id, text):
        self._get_or_404(post_id)
        if not text or not text.strip():
            raise ValidationError({'text': ['This field may not be blank.']})
        return self.store.add_comment(post_id, user_id, text)

    def _toggle(self, post_id, relation, user_id):
        post = self._get_or_404(post_id)
        if user_id in getattr(post, relation):
            return ToggleResult(count=self.store.remove_member(post_id, relation, user_id), member=False)
        return ToggleResult(count=self.store.add_member(post_id, relation, user_id), member=True)

    def toggle_like(self, post_id, user_id):
        return self._toggle(post_id, LIKES, user_id)

    def toggle_upvote(self, post_id, user_id):
        return self._toggle(post_id, UPVOTES, user_id)


def get_post_service():
    """Wire the service to the ORM store, default storage and signal notifier."""
    from .media import MediaStore
    from .signals import SignalStatusNotifier
    from .store import DjangoPostStore

    return PostService(
        store=DjangoPostStore(),
        media_store=MediaStore(),
        notifier=SignalStatusNotifier(),
    )
