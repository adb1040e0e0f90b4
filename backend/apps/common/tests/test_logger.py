import logging
import unittest

from apps.common.logger import AppLogger, get_logger


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class AppLoggerTests(unittest.TestCase):
    def setUp(self):
        self.std_logger = logging.getLogger("apps.common.tests.logger")
        self.std_logger.setLevel(logging.DEBUG)
        self.std_logger.propagate = False
        self.handler = RecordingHandler()
        self.std_logger.addHandler(self.handler)

    def tearDown(self):
        self.std_logger.removeHandler(self.handler)

    def test_bind_merges_context_without_mutating_parent(self):
        parent = get_logger("apps.common.tests.logger").bind(component="carts")
        child = parent.bind(service="CartService")
        self.assertEqual(parent.context, {"component": "carts"})
        self.assertEqual(child.context, {"component": "carts", "service": "CartService"})

    def test_context_is_rendered_and_attached(self):
        log = get_logger("apps.common.tests.logger").bind(component="carts")
        log.info("Item added to cart", line_item_id=7, quantity=2)
        record = self.handler.records[-1]
        self.assertEqual(record.getMessage(), "Item added to cart | component=carts line_item_id=7 quantity=2")
        self.assertEqual(record.context, {"component": "carts", "line_item_id": 7, "quantity": 2})

    def test_message_without_context_is_left_alone(self):
        AppLogger("apps.common.tests.logger").warning("plain")
        self.assertEqual(self.handler.records[-1].getMessage(), "plain")

    def test_disabled_levels_are_skipped(self):
        self.std_logger.setLevel(logging.WARNING)
        get_logger("apps.common.tests.logger").debug("hidden", value=1)
        self.assertEqual(self.handler.records, [])

    def test_non_scalar_values_use_repr(self):
        get_logger("apps.common.tests.logger").error("failed", failing=["redis"])
        self.assertIn("failing=['redis']", self.handler.records[-1].getMessage())
