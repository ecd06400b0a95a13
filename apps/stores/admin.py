"""
Stores App Django Admin
Superadmin interface for merchants, products, customers and orders
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from .models import CustomerProfile, Merchant, Order, OrderItem, Product


# ==========================================
# INLINE ADMIN CLASSES
# ==========================================

class ProductInline(admin.TabularInline):
    """Show products inside Merchant admin"""
    model = Product
    extra = 0
    fields = ['name', 'category', 'price', 'original_price', 'units_available', 'is_active']
    show_change_link = True


class OrderItemInline(admin.TabularInline):
    """Show order items inside Order admin"""
    model = OrderItem
    extra = 0
    readonly_fields = ['product', 'quantity', 'price', 'total']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


# ==========================================
# MERCHANT ADMIN
# ==========================================

@admin.register(Merchant)
class MerchantAdmin(admin.ModelAdmin):
    list_display = [
        'website_name', 'subdomain', 'email', 'active_badge',
        'payment_status', 'payout_badge', 'created_at'
    ]
    list_filter = ['is_active', 'payment_status', 'created_at']
    search_fields = ['website_name', 'name', 'email', 'subdomain', 'slug', 'phone']
    readonly_fields = ['id', 'user', 'created_at', 'updated_at', 'logo_preview']

    fieldsets = (
        ('Store', {
            'fields': ('id', 'user', 'name', 'website_name', 'email', 'phone', 'subdomain', 'slug', 'location', 'referral_code', 'nin')
        }),
        ('Payout Account', {
            'fields': ('account_name', 'account_number', 'bank_name', 'bank_code', 'paystack_subaccount_code')
        }),
        ('Status', {
            'fields': ('is_active', 'payment_status')
        }),
        ('Branding', {
            'fields': ('primary_color', 'logo', 'logo_preview')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    inlines = [ProductInline]

    actions = ['activate_merchants', 'deactivate_merchants', 'mark_paid']

    def active_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="color: green; font-weight: bold;">✓ Live</span>')
        return format_html('<span style="color: orange;">⏳ Inactive</span>')
    active_badge.short_description = 'Active'

    def payout_badge(self, obj):
        if obj.has_payout_account:
            return format_html('<span style="color: green;">✓ Split</span>')
        return format_html('<span style="color: red;">✗ Main account</span>')
    payout_badge.short_description = 'Payout'

    def logo_preview(self, obj):
        if obj.logo:
            return format_html('<img src="{}" width="100" height="100" style="object-fit: cover;" />', obj.logo.url)
        return '-'
    logo_preview.short_description = 'Logo'

    # Admin Actions
    def activate_merchants(self, request, queryset):
        """Activate selected merchants"""
        count = queryset.update(is_active=True)
        messages.success(request, f'{count} merchant(s) activated.')
    activate_merchants.short_description = 'Activate selected merchants'

    def deactivate_merchants(self, request, queryset):
        """Deactivate selected merchants"""
        count = queryset.update(is_active=False)
        messages.warning(request, f'{count} merchant(s) deactivated.')
    deactivate_merchants.short_description = 'Deactivate selected merchants'

    def mark_paid(self, request, queryset):
        count = queryset.update(payment_status=Merchant.PAYMENT_STATUS_PAID)
        messages.success(request, f'{count} merchant(s) marked as paid.')
    mark_paid.short_description = 'Mark subscription as paid'


# ==========================================
# PRODUCT ADMIN
# ==========================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'merchant', 'category', 'price', 'original_price', 'units_available', 'is_active']
    list_filter = ['category', 'is_active', 'location_state']
    search_fields = ['title', 'name', 'merchant__website_name']
    readonly_fields = ['id', 'created_at', 'updated_at']


# ==========================================
# CUSTOMER ADMIN
# ==========================================

@admin.register(CustomerProfile)
class CustomerProfileAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'phone', 'updated_at']
    search_fields = ['email', 'name', 'phone']


# ==========================================
# ORDER ADMIN
# ==========================================

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'order_reference', 'merchant', 'customer_name', 'total_amount',
        'payment_badge', 'tracking_status', 'created_at'
    ]
    list_filter = ['payment_status', 'tracking_status', 'created_at']
    search_fields = ['order_reference', 'customer_name', 'customer_email', 'customer_phone']
    readonly_fields = ['id', 'order_reference', 'total_amount', 'created_at', 'updated_at']
    inlines = [OrderItemInline]

    def payment_badge(self, obj):
        colors = {
            Order.PAYMENT_PENDING: 'orange',
            Order.PAYMENT_COMPLETED: 'green',
            Order.PAYMENT_FAILED: 'red',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            colors.get(obj.payment_status, 'gray'), obj.get_payment_status_display()
        )
    payment_badge.short_description = 'Payment'
