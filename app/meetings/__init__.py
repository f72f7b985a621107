"""
Meetings app for scheduling meetings inside communities.

This app handles:
- Scheduling meetings with an optional channel
- Joining meetings (participants, status transitions)
- Organizer-only status changes and deletion

Related apps:
    - communities: Community membership and channels
    - chat: Meeting events relayed to the meeting's channel room
"""
