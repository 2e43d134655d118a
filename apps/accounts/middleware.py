from django.utils.functional import SimpleLazyObject

from .session import check_auth


class AuthStateMiddleware:
    """Attach ``request.auth``; the token is checked the first time it is read."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth = SimpleLazyObject(lambda: check_auth(request))
        return self.get_response(request)
