from .sql_refresh_token_store import SQLRefreshTokenStore
from .sql_user_directory import SQLUserDirectory

__all__ = ["SQLRefreshTokenStore", "SQLUserDirectory"]
