"""Persistence layer: SQLAlchemy models and the credential store."""
from models.base_model import Base
from models.refresh_token import RefreshToken
from models.user import User
from models.db_storage import DBStorage

__all__ = ["Base", "User", "RefreshToken", "DBStorage"]
