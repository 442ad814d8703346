# livefeed/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Typed rejections rendered to API callers
- pubsub: WebSocket fan-out of newly created posts
- security: Password hashing and bearer tokens
"""
