# backend/portaldb/apps/training/__init__.py
"""
Training app

Responsible for:
- Instructor readiness (required modules, interview gate)
- Teaching-level grants from explicit permissions and legacy approvals
- The first-publish gate for class offerings
"""
