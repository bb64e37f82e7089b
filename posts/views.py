from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from .domain import Caller
from .serializers import (
    CommentCreateSerializer, CommentSerializer, PostCreateSerializer,
    PostListQuerySerializer, PostSerializer, PostUpdateSerializer,
)
from .services import get_post_service


class PostViewSet(viewsets.ViewSet):
    """
    ViewSet for reported issues.

    List: GET /api/posts?category=&status=&near=lat,lng[,radius]&limit=&page=
    My posts: GET /api/posts/user
    Retrieve: GET /api/posts/{id}
    Create: POST /api/posts (multipart, optional `media` file)
    Update status/assignment: PUT /api/posts/{id} (author or municipal)
    Comment: POST /api/posts/{id}/comments
    Like: POST /api/posts/{id}/like
    Upvote: POST /api/posts/{id}/upvote
    """
    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_value_regex = r'\d+'
    service_factory = staticmethod(get_post_service)

    @property
    def service(self):
        if not hasattr(self, '_service'):
            self._service = self.service_factory()
        return self._service

    def list(self, request):
        query = PostListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        posts = self.service.list(query.to_filters(), query.to_page())
        return Response(PostSerializer(posts, many=True).data)

    def retrieve(self, request, pk=None):
        post = self.service.get(int(pk))
        return Response(PostSerializer(post).data)

    def create(self, request):
        serializer = PostCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        post = self.service.create(
            author_id=request.user.id,
            title=data['title'],
            description=data['description'],
            category=data['category'],
            latitude=data['lat'],
            longitude=data['lng'],
            address=data.get('address', ''),
            media_file=data.get('media'),
        )
        return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = PostUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        post = self.service.update_status_or_assignment(
            int(pk),
            Caller(user_id=request.user.id, role=request.user.role),
            status=serializer.validated_data.get('status'),
            assigned_to=serializer.validated_data.get('assignedTo'),
        )
        return Response(PostSerializer(post).data)

    @action(detail=False, methods=['get'], url_path='user', permission_classes=[IsAuthenticated])
    def mine(self, request):
        """Posts reported by the current user, newest first"""
        posts = self.service.list_by_user(request.user.id)
        return Response(PostSerializer(posts, many=True).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def comments(self, request, pk=None):
        # Missing post wins over a bad body
        self.service.get(int(pk))
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comments = self.service.add_comment(int(pk), request.user.id, serializer.validated_data['text'])
        return Response(CommentSerializer(comments, many=True).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def like(self, request, pk=None):
        result = self.service.toggle_like(int(pk), request.user.id)
        return Response({'likes': result.count, 'userLiked': result.member})

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def upvote(self, request, pk=None):
        result = self.service.toggle_upvote(int(pk), request.user.id)
        return Response({'upvotes': result.count, 'hasUpvoted': result.member})
