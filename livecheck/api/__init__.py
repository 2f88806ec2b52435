"""
Service surface for livecheck.

Design intent:
- Keep HTTP/WebSocket handlers thin.
- Delegate lifecycle and state to the session controller.
"""
