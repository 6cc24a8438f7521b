from .fn import resolve_policy

__all__ = ("resolve_policy",)
