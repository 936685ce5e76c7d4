"""
Maintenance Use Cases
"""

from .cleanup_expired_use_case import CleanupExpiredUseCase

__all__ = ["CleanupExpiredUseCase"]
