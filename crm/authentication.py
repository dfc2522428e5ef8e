"""
Token authentication for the clinic API.

Settings reference this subclass of Django REST framework's
``TokenAuthentication`` instead of the DRF class directly.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Token authentication using the ``Token`` keyword."""

    keyword = 'Token'
