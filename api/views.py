from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@api_view(['GET'])
@permission_classes([AllowAny])
def health(request):
    """Liveness check"""
    return Response({'status': 'OK', 'message': 'Server is running'})


@csrf_exempt
def route_not_found(request, exception=None):
    return JsonResponse({'message': 'Route not found'}, status=404)


def server_error(request):
    return JsonResponse({'message': 'Something went wrong!'}, status=500)
