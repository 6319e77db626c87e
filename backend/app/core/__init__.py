# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and genre seeding
- db: Database configuration and connection management
- errors: API error taxonomy and exception handlers
- responses: The shared {status, code, message, data} envelope
- security: Authentication tokens and password hashing
"""
