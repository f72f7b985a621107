"""
WebSocket authentication middleware.

Provides JWT authentication for WebSocket connections.
Supports token via query string or subprotocol.

Related files:
    - routing.py: WebSocket URL patterns
    - consumers.py: WebSocket handlers
    - config/asgi.py: ASGI configuration

Token Passing Methods:
    1. Query string: ws://host/ws/chat/?token=<jwt_token>
    2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>

The verified user is attached to ``scope["user"]`` (AnonymousUser when no
token or an invalid one was presented) and the raw token to
``scope["token"]``. The connection is still anonymous for the hub until
the client sends ``identify``; see ChatConsumer.

Usage in config/asgi.py:
    from chat.middleware import JWTAuthMiddleware

    application = ProtocolTypeRouter({
        "websocket": JWTAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

logger = logging.getLogger(__name__)


def get_token_from_query(scope) -> str | None:
    """Extract token from query string."""
    query_string = scope.get("query_string", b"").decode()
    token_list = parse_qs(query_string).get("token", [])
    return token_list[0] if token_list else None


def get_token_from_subprotocol(scope) -> str | None:
    """
    Extract token from WebSocket subprotocol.

    Expects: Sec-WebSocket-Protocol: jwt, <token>
    """
    subprotocols = scope.get("subprotocols", [])
    if len(subprotocols) >= 2 and subprotocols[0] == "jwt":
        return subprotocols[1]
    return None


@database_sync_to_async
def get_user_from_token(token: str):
    """
    Validate JWT token and get user.

    Returns:
        User instance if valid, AnonymousUser otherwise
    """
    from authentication.services import IdentityService

    result = IdentityService.verify_token(token)
    if not result:
        logger.warning(f"Rejected WebSocket credential: {result.error_code}")
        return AnonymousUser()
    return result.data


class JWTAuthMiddleware(BaseMiddleware):
    """
    JWT authentication middleware for WebSocket connections.

    Extracts JWT token from query string or subprotocol,
    validates it, and attaches the user to the scope.

    Token sources (in order of precedence):
        1. Query string: ?token=<jwt_token>
        2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        token = get_token_from_query(scope) or get_token_from_subprotocol(scope)

        scope["token"] = token
        if token:
            scope["user"] = await get_user_from_token(token)
        else:
            scope["user"] = AnonymousUser()

        return await super().__call__(scope, receive, send)
