"""
Stores App Models
Merchants (storefront admins), their products, and customer orders.
"""

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from django.utils.text import slugify
from decimal import Decimal
import uuid


# ==========================================
# MERCHANTS
# ==========================================

class Merchant(models.Model):
    """
    One storefront tenant, owned by a user with the `admin` role.
    Created by merchant provisioning, activated by a superadmin.
    """

    PAYMENT_STATUS_PENDING = 'pending'
    PAYMENT_STATUS_PAID = 'paid'
    PAYMENT_STATUS_OVERDUE = 'overdue'

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_STATUS_PENDING, 'Pending'),
        (PAYMENT_STATUS_PAID, 'Paid'),
        (PAYMENT_STATUS_OVERDUE, 'Overdue'),
    ]

    DEFAULT_PRIMARY_COLOR = '#00A862'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='merchant'
    )

    # Store identity
    name = models.CharField(max_length=200, help_text="Owner's full name")
    website_name = models.CharField(max_length=200, help_text="Store display name")
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True)
    subdomain = models.SlugField(max_length=63, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    location = models.CharField(max_length=200, blank=True)
    referral_code = models.CharField(max_length=50, blank=True)

    nin = models.CharField(
        max_length=11,
        validators=[RegexValidator(r'^\d{11}$', 'NIN must be 11 digits')],
        verbose_name="NIN"
    )

    # Payout bank account
    account_name = models.CharField(max_length=200, blank=True)
    account_number = models.CharField(max_length=20, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    bank_code = models.CharField(max_length=10, blank=True)
    paystack_subaccount_code = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text="Paystack sub-account receiving the merchant share of each sale"
    )

    # Platform status
    is_active = models.BooleanField(default=False)
    payment_status = models.CharField(
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_STATUS_PENDING
    )

    # Branding
    primary_color = models.CharField(max_length=7, default=DEFAULT_PRIMARY_COLOR, help_text="Hex color code (e.g., #00A862)")
    logo = models.ImageField(upload_to='merchants/logos/', blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Merchant"
        verbose_name_plural = "Merchants"
        ordering = ['-created_at']

    def __str__(self):
        return self.website_name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.subdomain or self.website_name)
        super().save(*args, **kwargs)

    @property
    def has_payout_account(self):
        return bool(self.paystack_subaccount_code)


# ==========================================
# PRODUCTS
# ==========================================

class Product(models.Model):
    """
    A merchant's product. `price` is what the storefront charges;
    `original_price` is the merchant's own baseline price before markup.
    """

    CATEGORY_BABIES_KIDS = 'Babies & Kids'
    CATEGORY_FASHION = 'Fashion'
    CATEGORY_BEAUTY = 'Beauty & Personal Care'
    CATEGORY_SHOES = 'Shoes'

    CATEGORY_CHOICES = [
        (CATEGORY_BABIES_KIDS, CATEGORY_BABIES_KIDS),
        (CATEGORY_FASHION, CATEGORY_FASHION),
        (CATEGORY_BEAUTY, CATEGORY_BEAUTY),
        (CATEGORY_SHOES, CATEGORY_SHOES),
    ]

    # Fields each category must fill in
    CATEGORY_FIELDS = {
        CATEGORY_BABIES_KIDS: ['name', 'price', 'agerange', 'description'],
        CATEGORY_FASHION: ['name', 'price', 'size', 'color', 'description'],
        CATEGORY_BEAUTY: ['name', 'price', 'skintype', 'description'],
        CATEGORY_SHOES: ['name', 'price', 'size', 'material', 'description'],
    }

    ATTRIBUTE_KEYS = ['agerange', 'size', 'color', 'skintype', 'material']

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    merchant = models.ForeignKey(Merchant, on_delete=models.CASCADE, related_name='products')

    title = models.CharField(max_length=200, blank=True)
    name = models.CharField(max_length=200, blank=True)
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)

    # Pricing
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    original_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Merchant baseline price before platform markup"
    )
    adjusted_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    paystack_fee = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    superadmin_fee = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    units_available = models.PositiveIntegerField(default=1)

    # Location
    location_state = models.CharField(max_length=100)
    location_address = models.CharField(max_length=255)
    lga = models.CharField(max_length=100, verbose_name="LGA")

    # Category-specific details (size, color, agerange, ...)
    attributes = models.JSONField(default=dict, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Product"
        verbose_name_plural = "Products"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['merchant', 'is_active'], name='stores_prod_merchan_5d8c1e_idx'),
        ]

    def __str__(self):
        return self.title or self.name or str(self.id)

    @property
    def is_in_stock(self):
        return self.units_available > 0


# ==========================================
# CUSTOMERS
# ==========================================

class CustomerProfile(models.Model):
    """
    Lightweight record for guest checkouts, keyed by email.
    Name and phone follow the most recent order.
    """
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Customer Profile"
        verbose_name_plural = "Customer Profiles"
        ordering = ['-updated_at']

    def __str__(self):
        return f"{self.name} <{self.email}>"


# ==========================================
# ORDERS
# ==========================================

class Order(models.Model):
    """
    Customer order against a single merchant.
    Payment status only moves past `pending` through gateway settlement.
    """

    PAYMENT_PENDING = 'pending'
    PAYMENT_COMPLETED = 'completed'
    PAYMENT_FAILED = 'failed'

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_COMPLETED, 'Completed'),
        (PAYMENT_FAILED, 'Failed'),
    ]

    TRACKING_PROCESSING = 'processing'
    TRACKING_SHIPPED = 'shipped'
    TRACKING_OUT_FOR_DELIVERY = 'out_for_delivery'
    TRACKING_DELIVERED = 'delivered'
    TRACKING_CANCELLED = 'cancelled'

    TRACKING_STATUS_CHOICES = [
        (TRACKING_PROCESSING, 'Processing'),
        (TRACKING_SHIPPED, 'Shipped'),
        (TRACKING_OUT_FOR_DELIVERY, 'Out for Delivery'),
        (TRACKING_DELIVERED, 'Delivered'),
        (TRACKING_CANCELLED, 'Cancelled'),
    ]

    TRACKING_TRANSITIONS = {
        TRACKING_PROCESSING: [TRACKING_SHIPPED, TRACKING_CANCELLED],
        TRACKING_SHIPPED: [TRACKING_OUT_FOR_DELIVERY],
        TRACKING_OUT_FOR_DELIVERY: [TRACKING_DELIVERED],
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    merchant = models.ForeignKey(Merchant, on_delete=models.CASCADE, related_name='orders')
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )

    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=20)

    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_status = models.CharField(
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_PENDING
    )
    tracking_status = models.CharField(
        max_length=20,
        choices=TRACKING_STATUS_CHOICES,
        default=TRACKING_PROCESSING
    )
    order_reference = models.CharField(max_length=64, unique=True)
    verification_code = models.CharField(max_length=20, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['merchant', 'payment_status'], name='stores_orde_merchan_8a2f4b_idx'),
            models.Index(fields=['merchant', 'tracking_status'], name='stores_orde_merchan_c61e0d_idx'),
        ]

    def __str__(self):
        return f"Order {self.order_reference} - {self.payment_status}"

    def can_move_to(self, tracking_status):
        return tracking_status in self.TRACKING_TRANSITIONS.get(self.tracking_status, [])


class OrderItem(models.Model):
    """
    One line of an order, with the unit price at the time of checkout
    """
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='order_items')

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Order Item"
        verbose_name_plural = "Order Items"

    def __str__(self):
        return f"{self.product} x{self.quantity}"
