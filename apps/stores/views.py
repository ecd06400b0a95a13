"""
Stores App Views
JSON endpoints for checkout, payment initiation, merchant provisioning,
merchant catalog/order management, and the public storefront.
"""

from django.core.paginator import Paginator
from django.db.models import ProtectedError, Q
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .decorators import (
    api_admin_required, api_superadmin_required, json_api,
    merchant_owns_order, merchant_owns_product
)
from .forms import BrandingForm, MerchantStatusForm, OrderTrackingForm, ProductForm, first_error
from .models import Merchant
from .services.checkout import CheckoutService
from .services.config import PlatformConfig
from .services.exceptions import ConflictError, NotFoundError, ValidationError
from .services.notifications import EmailService
from .services.payments import PaymentSplitService
from .services.provisioning import MerchantProvisioningService
from .services.schemas import CheckoutRequest, MerchantRequest, PaymentRequest

import logging

logger = logging.getLogger(__name__)


ORDERS_PER_PAGE = 20
PRODUCTS_PER_PAGE = 12


def _money(value):
    return None if value is None else str(value)


def serialize_product(product):
    return {
        'id': str(product.id),
        'title': product.title,
        'name': product.name,
        'category': product.category,
        'description': product.description,
        'image_url': product.image_url,
        'price': _money(product.price),
        'original_price': _money(product.original_price),
        'units_available': product.units_available,
        'location_state': product.location_state,
        'location_address': product.location_address,
        'lga': product.lga,
        'attributes': product.attributes,
        'is_active': product.is_active,
    }


def serialize_order(order, include_items=False):
    data = {
        'id': str(order.id),
        'admin_id': str(order.merchant_id),
        'customer_id': order.customer_id,
        'customer_name': order.customer_name,
        'customer_email': order.customer_email,
        'customer_phone': order.customer_phone,
        'total_amount': _money(order.total_amount),
        'payment_status': order.payment_status,
        'tracking_status': order.tracking_status,
        'order_reference': order.order_reference,
        'created_at': order.created_at.isoformat(),
    }
    if include_items:
        data['items'] = [
            {
                'product_id': str(item.product_id),
                'quantity': item.quantity,
                'price': _money(item.price),
                'total': _money(item.total),
            }
            for item in order.items.all()
        ]
    return data


def serialize_merchant(merchant):
    return {
        'id': str(merchant.id),
        'website_name': merchant.website_name,
        'subdomain': merchant.subdomain,
        'slug': merchant.slug,
        'phone': merchant.phone,
        'location': merchant.location,
        'primary_color': merchant.primary_color,
        'logo': merchant.logo.url if merchant.logo else None,
        'is_active': merchant.is_active,
        'payment_status': merchant.payment_status,
    }


def _page(queryset, request, per_page):
    paginator = Paginator(queryset, per_page)
    page_obj = paginator.get_page(request.GET.get('page'))
    meta = {
        'page': page_obj.number,
        'num_pages': paginator.num_pages,
        'count': paginator.count,
    }
    return page_obj, meta


# ==========================================
# CHECKOUT & PAYMENT (PUBLIC)
# ==========================================

@csrf_exempt
@require_http_methods(["POST"])
@json_api
def checkout(request):
    """
    Create a pending order from a storefront cart
    """
    checkout_request = CheckoutRequest.from_payload(request.payload)
    order = CheckoutService(PlatformConfig.from_settings()).create_order(checkout_request)

    return JsonResponse({
        'success': True,
        'order': serialize_order(order, include_items=True),
        'order_reference': order.order_reference,
    }, status=201)


@csrf_exempt
@require_http_methods(["POST"])
@json_api
def initiate_payment(request):
    """
    Start a Paystack checkout for an order, splitting the merchant's share
    """
    payment_request = PaymentRequest.from_payload(request.payload)
    initiation = PaymentSplitService(PlatformConfig.from_settings()).initiate_payment(payment_request)

    return JsonResponse(initiation.as_dict())


# ==========================================
# SUPERADMIN
# ==========================================

@require_http_methods(["POST"])
@api_superadmin_required
@json_api
def merchant_create(request):
    """
    Provision a merchant admin (login, payout sub-account, store profile)
    """
    merchant_request = MerchantRequest.from_payload(request.payload)
    provisioned = MerchantProvisioningService(PlatformConfig.from_settings()).create_merchant(merchant_request)

    return JsonResponse({
        'success': True,
        'message': 'Admin created successfully',
        **provisioned.as_dict(),
    }, status=201)


@require_http_methods(["POST"])
@api_superadmin_required
@json_api
def merchant_status(request, merchant_id):
    """
    Activate/deactivate a merchant or change its billing status
    """
    form = MerchantStatusForm(data=request.payload)
    if not form.is_valid():
        raise ValidationError(first_error(form))

    merchant = MerchantProvisioningService(PlatformConfig.from_settings()).set_merchant_status(
        merchant_id,
        is_active=form.cleaned_data.get('is_active'),
        payment_status=form.cleaned_data.get('payment_status'),
    )

    return JsonResponse({'success': True, 'merchant': serialize_merchant(merchant)})


# ==========================================
# MERCHANT ADMIN: PRODUCTS
# ==========================================

@require_http_methods(["GET", "POST"])
@api_admin_required
@json_api
def products(request):
    """
    GET: list the merchant's products
    POST: create a product
    """
    merchant = request.merchant

    if request.method == 'POST':
        form = ProductForm(request.payload, merchant=merchant)
        if not form.is_valid():
            raise ValidationError(first_error(form))

        product = form.save()
        logger.info(f'Product created: {product.pk} merchant={merchant.pk}')
        return JsonResponse({'success': True, 'product': serialize_product(product)}, status=201)

    queryset = merchant.products.all()
    category = request.GET.get('category')
    if category:
        queryset = queryset.filter(category=category)

    return JsonResponse({'products': [serialize_product(p) for p in queryset]})


@require_http_methods(["POST", "DELETE"])
@api_admin_required
@json_api
@merchant_owns_product
def product_detail(request, product_id):
    """
    POST: partial update
    DELETE: remove a product that has never been ordered
    """
    product = request.product

    if request.method == 'DELETE':
        try:
            product.delete()
        except ProtectedError:
            raise ConflictError('Product has orders and cannot be deleted. Deactivate it instead.')

        logger.info(f'Product deleted: {product_id} merchant={request.merchant.pk}')
        return JsonResponse({'success': True})

    form = ProductForm(request.payload, instance=product, merchant=request.merchant)
    if not form.is_valid():
        raise ValidationError(first_error(form))

    product = form.save()
    return JsonResponse({'success': True, 'product': serialize_product(product)})


# ==========================================
# MERCHANT ADMIN: ORDERS
# ==========================================

@require_http_methods(["GET"])
@api_admin_required
@json_api
def orders(request):
    """
    List the merchant's orders, optionally filtered by status
    """
    queryset = request.merchant.orders.prefetch_related('items')

    payment_status = request.GET.get('payment_status')
    if payment_status:
        queryset = queryset.filter(payment_status=payment_status)

    tracking_status = request.GET.get('tracking_status')
    if tracking_status:
        queryset = queryset.filter(tracking_status=tracking_status)

    page_obj, meta = _page(queryset, request, ORDERS_PER_PAGE)

    return JsonResponse({
        'orders': [serialize_order(order, include_items=True) for order in page_obj],
        **meta,
    })


@require_http_methods(["POST"])
@api_admin_required
@json_api
@merchant_owns_order
def order_tracking(request, order_id):
    """
    Move an order along its delivery flow and notify the customer
    """
    order = request.order

    form = OrderTrackingForm(data=request.payload, order=order)
    if not form.is_valid():
        raise ValidationError(first_error(form))

    order.tracking_status = form.cleaned_data['tracking_status']
    update_fields = ['tracking_status', 'updated_at']
    if form.cleaned_data.get('verification_code'):
        order.verification_code = form.cleaned_data['verification_code']
        update_fields.append('verification_code')
    order.save(update_fields=update_fields)

    logger.info(f'Order {order.order_reference} tracking -> {order.tracking_status}')
    EmailService().send_order_tracking_update(order)

    return JsonResponse({'success': True, 'order': serialize_order(order)})


# ==========================================
# MERCHANT ADMIN: BRANDING
# ==========================================

@require_http_methods(["POST"])
@api_admin_required
@json_api
def branding(request):
    """
    Update store color and logo (multipart for logo uploads)
    """
    form = BrandingForm(request.payload, request.FILES, instance=request.merchant)
    if not form.is_valid():
        raise ValidationError(first_error(form))

    merchant = form.save()
    return JsonResponse({'success': True, 'merchant': serialize_merchant(merchant)})


# ==========================================
# PUBLIC STOREFRONT
# ==========================================

@require_http_methods(["GET"])
@json_api
def storefront(request, slug):
    """
    Public store by slug or subdomain, with its active products.
    No login required.
    """
    merchant = Merchant.objects.filter(Q(slug=slug) | Q(subdomain=slug), is_active=True).first()
    if merchant is None:
        raise NotFoundError('Store not found')

    queryset = merchant.products.filter(is_active=True).order_by('-created_at')
    page_obj, meta = _page(queryset, request, PRODUCTS_PER_PAGE)

    return JsonResponse({
        'store': serialize_merchant(merchant),
        'products': [serialize_product(p) for p in page_obj],
        **meta,
    })
