"""
Instantiates the storage singletons shared by the API:
- storage: SQLAlchemy-backed user records
- cache: redis-backed refresh/reset token entries
"""
from models.db_storage import DBStorage
from models.token_cache import TokenCache

storage = DBStorage()
storage.reload()

cache = TokenCache()
