import logging

from django.contrib.auth import authenticate, get_user_model
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import UserSerializer, UserRegistrationSerializer

User = get_user_model()
logger = logging.getLogger(__name__)


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }


class AuthViewSet(viewsets.GenericViewSet):
    """
    Registration and login for citizens and municipal staff.

    Register: POST /api/auth/register
    Login: POST /api/auth/login
    Me: GET /api/auth/me
    """
    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [AllowAny]
    # Credentials pass through here; never echo internal error detail
    expose_error_detail = False

    @action(detail=False, methods=['post'])
    def register(self, request):
        """Register a new user"""
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s with role %s", user.username, user.role)

        return Response({
            'user': UserSerializer(user).data,
            'tokens': _tokens_for(user),
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def login(self, request):
        """Login user with username/email and password"""
        username_or_email = request.data.get('username') or request.data.get('email')
        password = request.data.get('password')

        if not username_or_email or not password:
            return Response(
                {'message': 'Please provide both username/email and password'},
                status=status.HTTP_400_BAD_REQUEST
            )

        user = authenticate(username=username_or_email, password=password)

        if not user:
            # Try with email
            user_obj = User.objects.filter(email__iexact=username_or_email).first()
            if user_obj is not None:
                user = authenticate(username=user_obj.username, password=password)

        if user:
            return Response({
                'user': UserSerializer(user).data,
                'tokens': _tokens_for(user),
            })

        return Response(
            {'message': 'Invalid credentials'},
            status=status.HTTP_401_UNAUTHORIZED
        )

    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def me(self, request):
        """Get current authenticated user's profile"""
        return Response(UserSerializer(request.user).data)
