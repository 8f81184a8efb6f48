"""Inline, non-blocking guards for fragments of a page.

A component guard never redirects and never logs: it picks which HTML
fragment to emit and counts the check in ``permission_checks_total``. Denials
render nothing unless a fallback or the notice is asked for. Children and
fallbacks may be given as strings or as zero-argument callables; a callable is
only invoked when its branch is chosen.
"""

from __future__ import annotations

import functools
from html import escape
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from ..domain.policy import PolicyEvaluator
from ..metrics import record_permission_check
from .predicate import AccessPredicate, normalize_permissions
from .views import DENIAL_NOTICE

Renderable = Union[str, Callable[[], str]]


def materialize(fragment: Optional[Renderable]) -> str:
    if fragment is None:
        return ""
    if callable(fragment):
        return fragment()
    return fragment


def choose(
    allowed: bool,
    children: Renderable,
    fallback: Optional[Renderable] = None,
    show_fallback: bool = False,
) -> str:
    """children when allowed, else fallback, else the notice (if shown), else nothing."""
    if allowed:
        return materialize(children)
    if fallback is not None:
        return materialize(fallback)
    if show_fallback:
        return DENIAL_NOTICE
    return ""


class ProtectedComponent:
    def __init__(
        self,
        children: Renderable,
        predicate: Optional[AccessPredicate] = None,
        fallback: Optional[Renderable] = None,
        show_fallback: bool = False,
        *,
        permission: Any = None,
        permissions: Optional[Iterable[Any]] = None,
        require_all: bool = False,
        resource: Optional[str] = None,
        action: Optional[str] = None,
    ):
        if predicate is None:
            predicate = AccessPredicate(
                permission=permission,
                permissions=normalize_permissions(permissions),
                require_all=require_all,
                resource=resource,
                action=action,
            )
        self.children = children
        self.predicate = predicate
        self.fallback = fallback
        self.show_fallback = show_fallback

    def allowed(self, rbac: PolicyEvaluator) -> bool:
        result = self.predicate.evaluate(rbac)
        record_permission_check(self.predicate.kind, result)
        return result

    def render(self, rbac: PolicyEvaluator) -> str:
        return choose(self.allowed(rbac), self.children, self.fallback, self.show_fallback)


def with_permission(
    component: Callable[..., str],
    permission: Any,
    require_all: bool = False,
) -> Callable[..., str]:
    """Wrap a fragment builder so it only runs for sessions holding ``permission``.

    ``permission`` may be a single permission or a list. The wrapper takes the
    evaluator as its first argument and forwards the rest to ``component``.
    Denials show the generic notice.
    """
    if isinstance(permission, (list, tuple, set, frozenset)):
        predicate = AccessPredicate(permissions=tuple(permission), require_all=require_all)
    else:
        predicate = AccessPredicate(permissions=(permission,), require_all=require_all)

    @functools.wraps(component)
    def wrapper(rbac: PolicyEvaluator, *args: Any, **kwargs: Any) -> str:
        allowed = predicate.evaluate(rbac)
        record_permission_check(predicate.kind, allowed)
        return choose(
            allowed,
            lambda: component(*args, **kwargs),
            show_fallback=True,
        )

    return wrapper


class ConditionalRender:
    """Bare yes/no rendering helpers bound to one evaluator; denials render nothing."""

    def __init__(self, rbac: PolicyEvaluator):
        self.rbac = rbac

    @staticmethod
    def render_if(condition: bool, fragment: Renderable) -> str:
        return materialize(fragment) if condition else ""

    def _counted(self, check: str, allowed: bool, fragment: Renderable) -> str:
        record_permission_check(check, allowed)
        return self.render_if(allowed, fragment)

    def render_with_permission(self, permission: Any, fragment: Renderable) -> str:
        return self._counted("permission", self.rbac.has_permission(permission), fragment)

    def render_with_any_permission(self, permissions: Iterable[Any], fragment: Renderable) -> str:
        return self._counted("any", self.rbac.has_any_permission(permissions), fragment)

    def render_with_all_permissions(self, permissions: Iterable[Any], fragment: Renderable) -> str:
        return self._counted("all", self.rbac.has_all_permissions(permissions), fragment)

    def render_with_access(self, resource: str, action: str, fragment: Renderable) -> str:
        return self._counted("resource", self.rbac.can_access(resource, action), fragment)


def _attrs(attrs: Mapping[str, Any]) -> str:
    parts = []
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        name = key.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(str(value), quote=True)}"')
    return "".join(parts)


def protected_button(
    rbac: PolicyEvaluator,
    label: str,
    predicate: Optional[AccessPredicate] = None,
    **attrs: Any,
) -> str:
    """A ``<button>`` that is simply absent for sessions failing ``predicate``.

    Keyword arguments become HTML attributes (``class_`` -> ``class``,
    ``hx_post`` -> ``hx-post``).
    """
    attrs.setdefault("type", "button")
    html = f"<button{_attrs(attrs)}>{escape(label)}</button>"
    return ProtectedComponent(html, predicate or AccessPredicate(), show_fallback=False).render(rbac)


def protected_link(
    rbac: PolicyEvaluator,
    href: str,
    label: str,
    predicate: Optional[AccessPredicate] = None,
    **attrs: Any,
) -> str:
    html = f'<a href="{escape(href, quote=True)}"{_attrs(attrs)}>{escape(label)}</a>'
    return ProtectedComponent(html, predicate or AccessPredicate(), show_fallback=False).render(rbac)


__all__ = [
    "ConditionalRender",
    "ProtectedComponent",
    "Renderable",
    "choose",
    "materialize",
    "protected_button",
    "protected_link",
    "with_permission",
]
