# livefeed/services/__init__.py
"""
Service layer:
- stores: Tortoise-backed IdentityStore / ContentStore
- turnstile: ChallengeGate (Cloudflare Turnstile siteverify)
- auth_gateway: registration and login
- content_gateway: authenticated post creation + broadcast
"""
