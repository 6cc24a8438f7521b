from __future__ import annotations

from ..resolve import ResolvePolicy


def resolve_policy(
    *,
    cancel_pending: bool = True,
    concurrency: int | None = None,
) -> ResolvePolicy:
    # Validation happens inside ResolvePolicy.__post_init__.
    return ResolvePolicy(cancel_pending=cancel_pending, concurrency=concurrency)

__all__ = ("resolve_policy",)
