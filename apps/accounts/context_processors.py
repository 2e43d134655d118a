from django.conf import settings

MODALS = ("signin", "signup", "forgot")


def auth_state(request):
    state = getattr(request, "auth", None)
    modal = request.GET.get("modal")
    return {
        "auth": state,
        "is_login": bool(state and state.is_login),
        "is_admin": bool(state and state.is_admin),
        "current_user": state.user if state else None,
        "active_modal": modal if modal in MODALS else None,
        "search_query": request.GET.get("q", ""),
        "midtrans_client_key": settings.MIDTRANS_CLIENT_KEY,
        "midtrans_snap_url": settings.MIDTRANS_SNAP_URL,
    }
