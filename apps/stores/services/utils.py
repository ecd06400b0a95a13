"""
Stores App Utility Functions
Helpers for references, money, validation and file handling.
"""

import re
import secrets
import string
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple

from django.core.files.uploadedfile import UploadedFile
from PIL import Image
import logging

logger = logging.getLogger(__name__)


TWO_PLACES = Decimal('0.01')
PRICE_TOLERANCE = Decimal('0.01')

REFERENCE_PATTERN = re.compile(r'^[A-Z]+-\d+-[A-Z0-9]{6}$')


# ==========================================
# REFERENCES
# ==========================================

def generate_reference(prefix: str = 'GSB', length: int = 6) -> str:
    """
    Generate a unique order reference

    Args:
        prefix: Uppercase reference prefix (e.g., 'GSB')
        length: Length of the random base36 part

    Returns:
        Reference string (e.g., 'GSB-1718000000000-K3M9P2')
    """
    chars = string.ascii_uppercase + string.digits
    random_part = ''.join(secrets.choice(chars) for _ in range(length))
    timestamp = int(time.time() * 1000)

    return f"{prefix}-{timestamp}-{random_part}"


def is_valid_reference(reference: str) -> bool:
    return bool(reference and REFERENCE_PATTERN.match(reference))


# ==========================================
# MONEY & CALCULATIONS
# ==========================================

def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def within_tolerance(a: Decimal, b: Decimal, tolerance: Decimal = PRICE_TOLERANCE) -> bool:
    """Absolute difference check (not a percentage)"""
    return abs(a - b) <= tolerance


def to_minor_units(amount: Decimal) -> int:
    """
    Convert Naira to Kobo (Paystack amounts are in kobo)
    1 Naira = 100 Kobo

    Args:
        amount: Amount in Naira (e.g., 1000.00)

    Returns:
        Amount in kobo (e.g., 100000)
    """
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def format_currency(amount: Decimal, currency: str = 'NGN') -> str:
    """
    Format amount as currency string

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        Formatted string (e.g., '₦10,000.00')
    """
    if currency == 'NGN':
        symbol = '₦'
    elif currency == 'USD':
        symbol = '$'
    else:
        symbol = currency

    formatted = f"{amount:,.2f}"

    return f"{symbol}{formatted}"


# ==========================================
# VALIDATION
# ==========================================

def validate_nin(nin: str) -> Tuple[bool, str]:
    """
    Validate Nigerian National Identity Number

    Args:
        nin: NIN string

    Returns:
        Tuple of (is_valid: bool, error_message: str)
    """
    nin = re.sub(r'[\s\-]', '', nin or '')

    if not re.match(r'^\d{11}$', nin):
        return False, 'NIN must be exactly 11 digits'

    return True, ''


def normalize_phone(phone: str) -> str:
    """
    Normalize Nigerian phone number to international digits

    Examples:
        08012345678 -> 2348012345678
        +2348012345678 -> 2348012345678
    """
    phone = ''.join(filter(str.isdigit, phone or ''))

    if phone.startswith('0'):
        phone = '234' + phone[1:]
    elif phone and not phone.startswith('234'):
        phone = '234' + phone

    return phone


def mask_sensitive_info(text: str, visible_chars: int = 4) -> str:
    """
    Mask sensitive information (show only last N characters)

    Returns:
        Masked text (e.g., '*******5678')
    """
    if not text or len(text) <= visible_chars:
        return text

    masked_length = len(text) - visible_chars
    return '*' * masked_length + text[-visible_chars:]


# ==========================================
# FILE HANDLING
# ==========================================

def validate_image_file(file: UploadedFile, max_size_mb: int = 5) -> Tuple[bool, str]:
    """
    Validate uploaded image file

    Args:
        file: Uploaded file
        max_size_mb: Maximum file size in MB

    Returns:
        Tuple of (is_valid: bool, error_message: str)
    """
    max_size_bytes = max_size_mb * 1024 * 1024
    if file.size > max_size_bytes:
        return False, f'File size must be less than {max_size_mb}MB'

    allowed_types = ['image/jpeg', 'image/jpg', 'image/png']
    if file.content_type not in allowed_types:
        return False, 'Only JPG and PNG images are allowed'

    try:
        img = Image.open(file)
        img.verify()
    except Exception as e:
        logger.warning(f'Rejected image upload {file.name}: {e}')
        return False, 'Invalid image file'
    finally:
        file.seek(0)

    return True, ''
