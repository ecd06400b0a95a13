"""
Stores App Decorators
JSON request handling and access control for the API views
"""

import json
import logging
from functools import wraps

from django.http import JsonResponse

from .services.exceptions import StoreError

logger = logging.getLogger(__name__)


# ==========================================
# JSON API
# ==========================================

def json_api(view_func):
    """
    Decode the request body into `request.payload` and turn service
    errors into `{"error": message}` responses with the matching status.

    JSON bodies are decoded as-is; form and multipart bodies become a
    plain dict of their fields. Anything that is not a StoreError is
    logged and answered with a generic 500.

    Usage:
        @json_api
        def checkout(request):
            ...
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.method in ('GET', 'HEAD', 'DELETE'):
            request.payload = {}
        elif request.content_type == 'application/json':
            try:
                request.payload = json.loads(request.body or b'{}')
            except ValueError:
                return JsonResponse({'error': 'Invalid JSON body'}, status=400)
            if not isinstance(request.payload, dict):
                return JsonResponse({'error': 'Request body must be a JSON object'}, status=400)
        else:
            request.payload = request.POST.dict()

        try:
            return view_func(request, *args, **kwargs)
        except StoreError as e:
            logger.info(f'{request.method} {request.path} -> {e.status_code}: {e.message}')
            return JsonResponse(e.as_dict(), status=e.status_code)
        except Exception:
            logger.exception(f'Unhandled error in {request.method} {request.path}')
            return JsonResponse({'error': 'Internal server error'}, status=500)

    return wrapper


# ==========================================
# ROLE DECORATORS
# ==========================================

def api_admin_required(view_func):
    """
    Merchant admin endpoints. Returns JSON 401/403 instead of a redirect
    and exposes the admin's store as `request.merchant`.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Authentication required'}, status=401)

        if not request.user.is_merchant_admin or not hasattr(request.user, 'merchant'):
            return JsonResponse({'error': 'Merchant admin access required'}, status=403)

        request.merchant = request.user.merchant
        return view_func(request, *args, **kwargs)

    return wrapper


def api_superadmin_required(view_func):
    """Platform superadmin endpoints, JSON 401/403 on failure"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Authentication required'}, status=401)

        if not request.user.is_superadmin:
            return JsonResponse({'error': 'Superadmin access required'}, status=403)

        return view_func(request, *args, **kwargs)

    return wrapper


# ==========================================
# OWNERSHIP DECORATORS
# ==========================================

def merchant_owns_product(view_func):
    """
    Expects 'product_id' in URL kwargs; use after api_admin_required.
    Another merchant's product answers 404, same as a missing one.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        product = request.merchant.products.filter(pk=kwargs.get('product_id')).first()
        if product is None:
            return JsonResponse({'error': 'Product not found'}, status=404)

        request.product = product
        return view_func(request, *args, **kwargs)

    return wrapper


def merchant_owns_order(view_func):
    """Expects 'order_id' in URL kwargs; use after api_admin_required"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        order = request.merchant.orders.filter(pk=kwargs.get('order_id')).first()
        if order is None:
            return JsonResponse({'error': 'Order not found'}, status=404)

        request.order = order
        return view_func(request, *args, **kwargs)

    return wrapper
