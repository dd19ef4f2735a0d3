# backend/portaldb/apps/accounts/__init__.py
"""
Accounts app

Responsible for:
- Chapters and portal users
- The multi-role model (primary role plus UserRole rows)
- Role parsing and authorization helpers used by the other apps
"""
