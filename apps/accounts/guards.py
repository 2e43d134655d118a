"""
Access tiers for views.

- PUBLIC:  anybody.
- PRIVATE: signed-in visitors; everybody else goes back to ``/``.
- ADMIN:   administrators; anonymous visitors go to ``/``, signed-in
           non-admins to ``/profile/``.
"""
from functools import wraps
from typing import Optional

from django.shortcuts import redirect

from .session import AuthState

PUBLIC = "public"
PRIVATE = "private"
ADMIN = "admin"


def resolve_access(state: AuthState, tier: str) -> Optional[str]:
    """Return the URL name to redirect to, or None when access is granted."""
    if tier == PUBLIC:
        return None
    if not state.is_login:
        return "core:home"
    if tier == ADMIN and not state.is_admin:
        return "accounts:profile"
    return None


def _guard(tier):
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            target = resolve_access(request.auth, tier)
            if target:
                return redirect(target)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


signin_required = _guard(PRIVATE)
admin_required = _guard(ADMIN)


class AccessTierMixin:
    access_tier = PUBLIC

    def dispatch(self, request, *args, **kwargs):
        target = resolve_access(request.auth, self.access_tier)
        if target:
            return redirect(target)
        return super().dispatch(request, *args, **kwargs)


# Signed-in visitors only.
class SignInRequiredMixin(AccessTierMixin):
    access_tier = PRIVATE


# Administrators only.
class AdminRequiredMixin(AccessTierMixin):
    access_tier = ADMIN
