# klubok/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: User directory selection and demo account seeding
- db: Database configuration and connection management
- errors: Error taxonomy and HTTP boundary handlers
- security: Password hashing and session tokens
"""
