from .resolve import (
    ResolvePolicy,
    gather_matching,
    resolve_elementsM,
    resolve_matching,
    resolve_matching_w,
    resolve_matchingM,
)
from .settled import resolve_settled, resolve_settled_w, resolve_settledM
from .trace import ResolveEvent, resolve_matching_traced

__all__ = (
    # Policies
    "ResolvePolicy",
    # Events
    "ResolveEvent",
    # Fail-fast
    "resolve_matching",
    "resolve_matching_w",
    "resolve_matching_traced",
    "resolve_matchingM",
    "resolve_elementsM",
    "gather_matching",
    # Settled
    "resolve_settled",
    "resolve_settled_w",
    "resolve_settledM",
)
