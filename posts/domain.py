"""
Plain records the post service works with.

The store resolves references (author, assignee, comment authors) into these
records, so the service never touches the ORM directly.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, List, Optional

CATEGORIES = ('roads', 'lighting', 'sanitation', 'water', 'parks', 'safety', 'other')

STATUS_REPORTED = 'reported'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_RESOLVED = 'resolved'
STATUSES = (STATUS_REPORTED, STATUS_IN_PROGRESS, STATUS_RESOLVED)

ROLE_MUNICIPAL = 'municipal'

# Membership sets a user can toggle themselves into
LIKES = 'likes'
UPVOTES = 'upvotes'


@dataclass(frozen=True)
class UserRef:
    id: int
    name: str
    department: str = ''


@dataclass(frozen=True)
class Media:
    """Uploaded photo or video. A post carries at most one."""
    url: str
    kind: ClassVar[str] = ''

    @staticmethod
    def from_kind(kind: str, url: str) -> Optional['Media']:
        if not kind or not url:
            return None
        for variant in (Image, Video):
            if variant.kind == kind:
                return variant(url)
        raise ValueError(f"Unknown media kind: {kind}")


@dataclass(frozen=True)
class Image(Media):
    kind: ClassVar[str] = 'image'


@dataclass(frozen=True)
class Video(Media):
    kind: ClassVar[str] = 'video'


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    address: str = ''


@dataclass(frozen=True)
class CommentRecord:
    id: int
    user: UserRef
    text: str
    created_at: datetime


@dataclass
class PostRecord:
    id: int
    title: str
    description: str
    category: str
    location: GeoPoint
    author: UserRef
    status: str = STATUS_REPORTED
    media: Optional[Media] = None
    assigned_to: Optional[UserRef] = None
    upvotes: List[int] = field(default_factory=list)
    likes: List[int] = field(default_factory=list)
    shares: int = 0
    comments: List[CommentRecord] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def image_url(self) -> Optional[str]:
        return self.media.url if isinstance(self.media, Image) else None

    @property
    def video_url(self) -> Optional[str]:
        return self.media.url if isinstance(self.media, Video) else None


@dataclass(frozen=True)
class Proximity:
    latitude: float
    longitude: float
    radius_meters: float = 5000

    @classmethod
    def parse(cls, raw: str, default_radius: float = 5000) -> 'Proximity':
        """Parse ``"lat,lng[,radius]"``. Raises ValueError on malformed input."""
        parts = [p.strip() for p in raw.split(',')]
        if len(parts) not in (2, 3):
            raise ValueError("near must be 'lat,lng' or 'lat,lng,radius'")
        lat, lng = float(parts[0]), float(parts[1])
        radius = float(parts[2]) if len(parts) == 3 else float(default_radius)
        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise ValueError("near coordinates are out of range")
        if radius <= 0:
            raise ValueError("near radius must be positive")
        return cls(latitude=lat, longitude=lng, radius_meters=radius)


@dataclass(frozen=True)
class PostFilters:
    category: Optional[str] = None
    status: Optional[str] = None
    near: Optional[Proximity] = None


@dataclass(frozen=True)
class Page:
    limit: int = 20
    page: int = 1

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: str = ''

    @property
    def is_municipal(self) -> bool:
        return self.role == ROLE_MUNICIPAL


@dataclass(frozen=True)
class ToggleResult:
    count: int
    member: bool
