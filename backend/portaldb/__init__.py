# backend/portaldb/__init__.py
"""
Import ORM models from each app so that Alembic and
Base.metadata.create_all() see every table.

The model classes themselves live in portaldb/apps/*/models.py.
"""

from .apps.accounts import models as accounts_models            # chapters / users / roles
from .apps.training import models as training_models            # readiness inputs + offerings
from .apps.feature_gates import models as feature_gates_models  # scoped feature rules

__all__ = [
    "accounts_models",
    "training_models",
    "feature_gates_models",
]
