from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings


# Test runs use --nomigrations, so point the loader back at the real files
@override_settings(MIGRATION_MODULES={})
class MigrationStateTests(TestCase):

    def test_models_match_migrations(self):
        out = StringIO()
        try:
            call_command('makemigrations', '--check', '--dry-run', stdout=out, stderr=StringIO())
        except SystemExit:
            self.fail(f'Models have changes without a migration:\n{out.getvalue()}')
