"""
Operator accounts and the audit trail.

Administrators create operator accounts; only the super administrator may
change a role.  The audit log is read from :class:`crm.models.AuditEvent`,
which every money-moving endpoint writes to.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import AuditEvent
from ..permissions import IsAdminRole, IsSuper
from ..serializers.auth import RoleSerializer, UserSerializer
from ..services.audit import log_action

User = get_user_model()


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """Return the current operator's profile."""
    return Response({'success': True, 'data': UserSerializer(request.user).data})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def users(request):
    if request.method == 'GET':
        qs = User.objects.order_by('username')
        return Response({'success': True, 'data': UserSerializer(qs, many=True).data})

    s = UserSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = User(
        username=vd['username'],
        first_name=vd.get('first_name', ''),
        email=vd.get('email', ''),
        role=vd['role'],
    )
    user.set_password(vd['password'])
    user.save()
    log_action(user=request.user, action='user_create', object_type='user', object_id=user.id,
               detail={'username': user.username, 'role': user.role})
    return Response({'success': True, 'message': 'User created successfully', 'data': UserSerializer(user).data},
                    status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuper])
def set_role(request, pk):
    user = User.objects.filter(pk=pk).first()
    if not user:
        return Response({'success': False, 'message': 'User not found', 'error': 'not_found'}, status=status.HTTP_404_NOT_FOUND)
    s = RoleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    old = user.role
    user.role = s.validated_data['role']
    user.save(update_fields=['role'])
    log_action(user=request.user, action='user_set_role', object_type='user', object_id=user.id,
               detail={'from': old, 'to': user.role})
    return Response({'success': True, 'data': UserSerializer(user).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def audit_log(request):
    """Latest audit events, newest first.

    Query params:
      - action: exact action name, e.g. ``ledger_save``
      - objectType: ``doctor``, ``staff``, ``patient`` or ``user``
      - limit: default 100, at most 500
    """
    qs = AuditEvent.objects.select_related('user').order_by('-created_at', '-id')
    action = request.query_params.get('action')
    if action:
        qs = qs.filter(action=action)
    object_type = request.query_params.get('objectType')
    if object_type:
        qs = qs.filter(object_type=object_type)
    try:
        limit = min(int(request.query_params.get('limit') or 100), 500)
    except ValueError:
        return Response({'success': False, 'message': 'limit must be an integer', 'error': 'invalid'}, status=status.HTTP_400_BAD_REQUEST)

    data = [{
        'id': e.id,
        'action': e.action,
        'user': e.user.username if e.user else None,
        'objectType': e.object_type,
        'objectId': e.object_id,
        'detail': e.detail,
        'time': e.created_at,
    } for e in qs[:max(limit, 1)]]
    return Response({'success': True, 'data': data})
