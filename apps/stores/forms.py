"""
Stores App Forms
Field validation for checkout, payment, provisioning and catalog payloads.
"""

from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.forms.models import model_to_dict

from .models import Merchant, Order, Product
from .services.utils import validate_image_file, validate_nin


hex_color_validator = RegexValidator(
    regex=r'^#[0-9A-Fa-f]{6}$',
    message='Color must be a hex code like #00A862'
)


def first_error(form, prefix: str = '') -> str:
    """
    Flatten a bound form's errors into one message

    Returns:
        'field: message' for the first failing field, or the first
        non-field error as-is
    """
    for field, errors in form.errors.items():
        if not errors:
            continue
        if field == '__all__':
            return errors[0]
        return f'{prefix}{field}: {errors[0]}'
    return 'Invalid request'


# ==========================================
# CHECKOUT & PAYMENT
# ==========================================

class CheckoutForm(forms.Form):
    """
    Top-level checkout fields (line items are checked by OrderLineForm)
    """
    admin_id = forms.UUIDField()
    customer_id = forms.IntegerField(required=False, min_value=1)
    customer_name = forms.CharField(max_length=200)
    customer_email = forms.EmailField()
    customer_phone = forms.CharField(max_length=20)
    total_amount = forms.DecimalField(
        error_messages={'required': 'total_amount must be a number'}
    )


class OrderLineForm(forms.Form):
    product_id = forms.UUIDField()
    quantity = forms.IntegerField(
        min_value=1,
        error_messages={'min_value': 'Quantity must be greater than 0'}
    )
    price = forms.DecimalField(
        min_value=0,
        error_messages={'min_value': 'Price must be non-negative'}
    )


class PaymentInitForm(forms.Form):
    order_id = forms.UUIDField()
    email = forms.EmailField()
    amount = forms.DecimalField(
        min_value=0,
        error_messages={'required': 'amount must be a number'}
    )
    admin_id = forms.UUIDField()
    customer_name = forms.CharField(max_length=200)
    customer_phone = forms.CharField(max_length=20)


# ==========================================
# MERCHANT PROVISIONING & MANAGEMENT
# ==========================================

class MerchantCreateForm(forms.Form):
    """
    Superadmin form for provisioning a new merchant admin
    """
    email = forms.EmailField()
    password = forms.CharField(required=False, min_length=8, strip=False)
    name = forms.CharField(max_length=200)
    nin = forms.CharField(max_length=20)
    subdomain = forms.SlugField(max_length=63)
    slug = forms.SlugField(max_length=100, required=False)
    website_name = forms.CharField(max_length=200, required=False)
    phone = forms.CharField(max_length=20, required=False)

    account_name = forms.CharField(max_length=200, required=False)
    account_number = forms.CharField(
        max_length=10,
        required=False,
        validators=[RegexValidator(r'^\d{10}$', 'Account number must be 10 digits')]
    )
    bank_name = forms.CharField(max_length=100, required=False)
    bank_code = forms.CharField(max_length=10, required=False)
    paystack_subaccount_code = forms.CharField(max_length=100, required=False)

    primary_color = forms.CharField(max_length=7, required=False, validators=[hex_color_validator])
    referral_code = forms.CharField(max_length=50, required=False)
    location = forms.CharField(max_length=200, required=False)

    def clean_nin(self):
        nin = self.cleaned_data.get('nin', '').replace(' ', '').replace('-', '')
        is_valid, error = validate_nin(nin)
        if not is_valid:
            raise ValidationError(error)
        return nin

    def clean_subdomain(self):
        return self.cleaned_data['subdomain'].lower()

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get('website_name') and cleaned_data.get('name'):
            cleaned_data['website_name'] = cleaned_data['name']
        if not cleaned_data.get('slug') and cleaned_data.get('subdomain'):
            cleaned_data['slug'] = cleaned_data['subdomain']
        return cleaned_data


class MerchantStatusForm(forms.Form):
    """
    Superadmin activation / billing status change
    """
    is_active = forms.NullBooleanField(required=False)
    payment_status = forms.ChoiceField(
        choices=[('', '---')] + Merchant.PAYMENT_STATUS_CHOICES,
        required=False
    )

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('is_active') is None and not cleaned_data.get('payment_status'):
            raise ValidationError('Provide is_active or payment_status')
        return cleaned_data


class BrandingForm(forms.ModelForm):
    primary_color = forms.CharField(max_length=7, required=False, validators=[hex_color_validator])

    class Meta:
        model = Merchant
        fields = ['primary_color', 'logo']

    def clean_primary_color(self):
        return self.cleaned_data.get('primary_color') or self.instance.primary_color

    def clean_logo(self):
        logo = self.cleaned_data.get('logo')
        if logo and hasattr(logo, 'content_type'):
            is_valid, error = validate_image_file(logo, max_size_mb=5)
            if not is_valid:
                raise ValidationError(error)
        return logo


# ==========================================
# PRODUCTS
# ==========================================

class ProductForm(forms.ModelForm):
    """
    Create/update a product. Each category has its own required fields;
    category-specific values are stored in `attributes`.
    """

    # Storefront clients send camelCase location keys
    FIELD_ALIASES = {
        'locationState': 'location_state',
        'locationAddress': 'location_address',
    }

    agerange = forms.CharField(max_length=50, required=False)
    size = forms.CharField(max_length=50, required=False)
    color = forms.CharField(max_length=50, required=False)
    skintype = forms.CharField(max_length=50, required=False)
    material = forms.CharField(max_length=100, required=False)

    class Meta:
        model = Product
        fields = [
            'title', 'name', 'category', 'description', 'image_url',
            'price', 'original_price', 'adjusted_price', 'paystack_fee', 'superadmin_fee',
            'units_available', 'location_state', 'location_address', 'lga', 'is_active',
        ]

    def __init__(self, data=None, *args, merchant=None, **kwargs):
        instance = kwargs.get('instance')
        if data is not None:
            data = self._merge_with_instance(self._apply_aliases(data), instance)
        super().__init__(data, *args, **kwargs)
        self.merchant = merchant

    @classmethod
    def _apply_aliases(cls, data):
        data = dict(data)
        for alias, field in cls.FIELD_ALIASES.items():
            if alias in data and field not in data:
                data[field] = data.pop(alias)
        return data

    def _merge_with_instance(self, data, instance):
        """Partial updates keep the stored values for omitted fields"""
        if instance is None or instance.pk is None:
            data.setdefault('is_active', True)
            return data
        merged = model_to_dict(instance, fields=self._meta.fields)
        merged.update(instance.attributes or {})
        merged.update(data)
        return merged

    def clean_original_price(self):
        return self.cleaned_data.get('original_price') or Decimal('0.00')

    def clean(self):
        cleaned_data = super().clean()
        category = cleaned_data.get('category')
        required = Product.CATEGORY_FIELDS.get(category, [])
        missing = [f for f in required if cleaned_data.get(f) in (None, '')]
        if category and missing:
            raise ValidationError(
                f"Missing required fields for category {category}: {', '.join(missing)}"
            )
        return cleaned_data

    def save(self, commit=True):
        product = super().save(commit=False)
        if self.merchant is not None:
            product.merchant = self.merchant
        product.attributes = {
            key: self.cleaned_data[key]
            for key in Product.ATTRIBUTE_KEYS
            if self.cleaned_data.get(key)
        }
        if commit:
            product.save()
        return product


# ==========================================
# ORDERS
# ==========================================

class OrderTrackingForm(forms.Form):
    tracking_status = forms.ChoiceField(choices=Order.TRACKING_STATUS_CHOICES)
    verification_code = forms.CharField(max_length=20, required=False)

    def __init__(self, *args, order=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.order = order

    def clean_tracking_status(self):
        status = self.cleaned_data['tracking_status']
        if self.order is not None and not self.order.can_move_to(status):
            raise ValidationError(
                f'Invalid status transition: {self.order.tracking_status} -> {status}'
            )
        return status
