from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase

from apps.stores.services.utils import (
    format_currency, generate_reference, is_valid_reference, mask_sensitive_info,
    normalize_phone, to_minor_units, validate_image_file, validate_nin, within_tolerance
)

from .helpers import png_bytes


class ReferenceTests(SimpleTestCase):

    def test_format(self):
        reference = generate_reference('GSB')

        self.assertTrue(is_valid_reference(reference))
        prefix, timestamp, suffix = reference.split('-')
        self.assertEqual(prefix, 'GSB')
        self.assertEqual(len(timestamp), 13)
        self.assertEqual(len(suffix), 6)

    def test_batch_is_distinct(self):
        references = [generate_reference('GSB') for _ in range(1000)]

        self.assertEqual(len(set(references)), 1000)
        self.assertTrue(all(is_valid_reference(reference) for reference in references))

    def test_rejects_lowercase_suffix(self):
        self.assertFalse(is_valid_reference('GSB-1718000000000-abc123'))
        self.assertFalse(is_valid_reference(''))


class MoneyTests(SimpleTestCase):

    def test_tolerance_is_absolute(self):
        self.assertTrue(within_tolerance(Decimal('100.00'), Decimal('100.01')))
        self.assertFalse(within_tolerance(Decimal('100.00'), Decimal('100.02')))

    def test_minor_units(self):
        self.assertEqual(to_minor_units(Decimal('1500.50')), 150050)
        self.assertEqual(to_minor_units(Decimal('0.005')), 1)

    def test_format_currency(self):
        self.assertEqual(format_currency(Decimal('10000')), '₦10,000.00')


class ValidationHelperTests(SimpleTestCase):

    def test_nin(self):
        self.assertEqual(validate_nin('123 4567 8901'), (True, ''))
        self.assertFalse(validate_nin('1234')[0])

    def test_phone(self):
        self.assertEqual(normalize_phone('08012345678'), '2348012345678')
        self.assertEqual(normalize_phone('+234 801 234 5678'), '2348012345678')
        self.assertEqual(normalize_phone(''), '')

    def test_mask(self):
        self.assertEqual(mask_sensitive_info('0123456789'), '******6789')

    def test_image_ok(self):
        upload = SimpleUploadedFile('logo.png', png_bytes(), content_type='image/png')
        self.assertEqual(validate_image_file(upload), (True, ''))

    def test_image_wrong_type(self):
        upload = SimpleUploadedFile('logo.gif', b'GIF89a', content_type='image/gif')
        self.assertFalse(validate_image_file(upload)[0])

    def test_image_corrupt(self):
        upload = SimpleUploadedFile('logo.png', b'not really a png', content_type='image/png')
        self.assertEqual(validate_image_file(upload), (False, 'Invalid image file'))
