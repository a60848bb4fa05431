"""The view of the host graph that tools are allowed to use."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Protocol, runtime_checkable

Unsubscribe = Callable[[], None]


@runtime_checkable
class ReferenceResolver(Protocol):
    """Resolves reference roles of one operation node.

    References under a role keep the order in which the host stored
    them; tools rely on that order.  A dangling reference resolves to
    ``None`` but still counts.
    """

    def resolve(self, role: str, index: int = 0) -> Optional[Any]:
        ...

    def count(self, role: str) -> int:
        ...

    def parameter(self, key: str) -> Any:
        ...

    def observe_role(self, role: str, events: Iterable[str],
                     callback: Callable[[Any, str], None]) -> Unsubscribe:
        ...


def resolve_all(resolver: ReferenceResolver, role: str) -> List[Optional[Any]]:
    """All nodes referenced under ``role``, in reference order."""

    return [resolver.resolve(role, i) for i in range(resolver.count(role))]


__all__ = ["ReferenceResolver", "Unsubscribe", "resolve_all"]
