"""Database module for the local template store.

Provides:
- Database connection management
- Schema initialization
- Repository functions for the project_templates table
"""

from pivotlaunch.db.database import get_db, init_db

__all__ = ["get_db", "init_db"]
