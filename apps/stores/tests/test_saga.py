from django.test import SimpleTestCase

from apps.stores.services.saga import Saga


class SagaTests(SimpleTestCase):

    def test_results_flow_between_steps(self):
        saga = Saga('demo')
        saga.step('a', lambda r: 1)
        saga.step('b', lambda r: r['a'] + 1)

        self.assertEqual(saga.run(), {'a': 1, 'b': 2})

    def test_failure_compensates_in_reverse_and_reraises(self):
        undone = []

        def boom(results):
            raise ValueError('step c failed')

        saga = (
            Saga('demo')
            .step('a', lambda r: 'A', compensate=undone.append)
            .step('b', lambda r: 'B', compensate=undone.append)
            .step('c', boom, compensate=undone.append)
        )

        with self.assertRaisesMessage(ValueError, 'step c failed'):
            saga.run()

        self.assertEqual(undone, ['B', 'A'])

    def test_failing_compensation_does_not_stop_the_rest(self):
        undone = []

        def broken(value):
            raise RuntimeError('cannot undo')

        def boom(results):
            raise KeyError('x')

        saga = Saga('demo')
        saga.step('a', lambda r: 'A', compensate=undone.append)
        saga.step('b', lambda r: 'B', compensate=broken)
        saga.step('c', boom)

        with self.assertLogs('apps.stores.services.saga', level='ERROR'):
            with self.assertRaises(KeyError):
                saga.run()

        self.assertEqual(undone, ['A'])
