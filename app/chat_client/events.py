"""
Realtime event names as seen by the client.

Kept free of Django imports so the client runs outside the server
process; the names must match chat.constants.REALTIME_EVENTS.
"""

IDENTIFY = "identify"
SUBSCRIBE_CHANNEL = "subscribe-channel"
UNSUBSCRIBE_CHANNEL = "unsubscribe-channel"
SEND_MESSAGE = "send-message"
TYPING = "typing"
STOP_TYPING = "stop-typing"

IDENTIFIED = "identified"
SUBSCRIBED = "subscribed"
UNSUBSCRIBED = "unsubscribed"
ERROR = "error"

MESSAGE_CREATED = "message-created"
MESSAGE_UPDATED = "message-updated"
MESSAGE_DELETED = "message-deleted"
