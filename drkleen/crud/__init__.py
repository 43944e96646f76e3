from .admin_users import AdminUserStore

__all__ = ["AdminUserStore"]
