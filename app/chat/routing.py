"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - The realtime hub (one connection per client, many rooms)

Authentication:
    JWT token should be passed as query parameter: ?token=<jwt_access_token>
    (or as the subprotocol pair "jwt", <token>). JWTAuthMiddleware
    validates it and attaches the user to the consumer's scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
