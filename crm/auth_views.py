"""
Authentication views.

This module defines the login endpoint used by the front-end together with
the JWT refresh/logout pair.  Every login attempt is written to the audit
trail.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from crm.serializers.auth import LoginSerializer
from crm.services.audit import log_action

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Username/password login (no role bypass)
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Login with username/password only; any ``role`` in the body is ignored.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=username, password=password)
    if not user:
        # only the username is recorded for failed attempts
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username, 'ip': ip})
        logger.warning('Failed login for %s from %s', username, ip)
        return Response({'success': False, 'message': 'Invalid username or password', 'error': 'invalid_credentials'}, status=400)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)

    return Response({
        'success': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.get_full_name() or user.username,
            'role': user.role,
        },
    }, status=200)

# ScopedRateThrottle reads throttle_scope from the view class built by @api_view
login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist current user's refresh tokens (all or a given one)."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            return Response({'success': False, 'message': 'Invalid refresh token', 'error': str(e)}, status=400)
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'success': True, 'blacklisted': count})
