"""
Session subsystem.

Components:
- storage.py: durable key/value storage (JSON file) + in-memory variant
- store.py: SessionStore (token, login/signup/logout/expire)
- gate.py: AuthGate for protected routes
"""
