"""HTTP middleware."""

from dashapi.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
