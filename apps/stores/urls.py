from django.urls import path
from . import views

app_name = 'stores'

urlpatterns = [
    # ==========================================
    # CHECKOUT & PAYMENT
    # ==========================================
    path('api/checkout/', views.checkout, name='checkout'),
    path('api/payments/initiate/', views.initiate_payment, name='initiate_payment'),

    # ==========================================
    # SUPERADMIN
    # ==========================================
    path('api/superadmin/merchants/', views.merchant_create, name='merchant_create'),
    path('api/superadmin/merchants/<uuid:merchant_id>/status/', views.merchant_status, name='merchant_status'),

    # ==========================================
    # MERCHANT ADMIN
    # ==========================================
    path('api/admin/products/', views.products, name='products'),
    path('api/admin/products/<uuid:product_id>/', views.product_detail, name='product_detail'),
    path('api/admin/orders/', views.orders, name='orders'),
    path('api/admin/orders/<uuid:order_id>/tracking/', views.order_tracking, name='order_tracking'),
    path('api/admin/branding/', views.branding, name='branding'),

    # Public storefront
    path('store/<slug:slug>/', views.storefront, name='storefront'),
]
