from hpbtoken.tests.hpb_unit_test import HpbTestCase
from hpbtoken.transaction.types import AddressValue, EventLog, TxResult, Value

owner_address = '0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf'


class TestAddressValue(HpbTestCase):

    def test_conversions(self):
        a = AddressValue(owner_address)
        self.assertEqual(str(a), owner_address.lower())
        self.assertEqual(AddressValue(int(owner_address, 16)), a)
        self.assertEqual(AddressValue(bytes.fromhex(owner_address[2:])), a)
        self.assertEqual(AddressValue(a), a)
        self.assertEqual(len(a.val), 20)

    def test_invalid_length(self):
        with self.assertRaises(ValueError):
            AddressValue(b'\x01' * 19)

    def test_invalid_strings(self):
        for val in ['abc', '0x12', 'deadbeef', '0x' + '1' * 42, owner_address[:-1] + 'F']:
            with self.assertRaises(ValueError, msg=val):
                AddressValue(val)
        self.assertEqual(AddressValue(owner_address.lower()), AddressValue(owner_address[2:].lower()))

    def test_out_of_range(self):
        with self.assertRaises(ValueError):
            AddressValue(2 ** 160)
        with self.assertRaises(ValueError):
            AddressValue(-1)

    def test_not_equal_to_plain_tuple(self):
        a = AddressValue(1)
        self.assertFalse(a == (a.val, ))
        self.assertEqual(hash(a), hash(AddressValue(1)))

    def test_unwrap(self):
        a = AddressValue(1)
        self.assertEqual(Value.unwrap_values([a, 5, {'x': a}]), [a.val, 5, {'x': a.val}])
        self.assertEqual(Value.collection_to_string((1, [2, 3])), '(1, [2, 3])')

    def test_balance_without_backend(self):
        old = AddressValue.get_balance
        AddressValue.get_balance = None
        try:
            with self.assertRaises(RuntimeError):
                _ = AddressValue(1).balance
        finally:
            AddressValue.get_balance = old


class TestTxResult(HpbTestCase):
    def setUp(self) -> None:
        super().setUp()
        contract = AddressValue(2)
        self.events = [
            EventLog('Transfer', {'from': '0x0', 'to': owner_address, 'value': 6000}, 3, contract),
            EventLog('IssueToken', {'index': 0, 'addr': owner_address, 'ethAmount': 1, 'tokenAmount': 6000}, 2, contract),
            EventLog('Transfer', {'from': owner_address, 'to': '0x0', 'value': 1}, 5, contract),
        ]
        self.result = TxResult(b'\x00' * 32, 7, 51234, 1, self.events)

    def test_events_in_log_order(self):
        self.assertEqual(self.result.event_names, ['IssueToken', 'Transfer', 'Transfer'])
        self.assertEqual([e.log_index for e in self.result.events], [2, 3, 5])

    def test_lookup(self):
        self.assertTrue(self.result.has_event('IssueToken'))
        self.assertFalse(self.result.has_event('SaleStarted'))
        self.assertIsNone(self.result.find_event('InvalidCaller'))
        self.assertEqual(self.result.find_event('Transfer')['value'], 6000)
        self.assertEqual(len(self.result.events_named('Transfer')), 2)

    def test_receipt_fields(self):
        self.assertEqual(self.result.block_number, 7)
        self.assertEqual(self.result.gas_used, 51234)
        self.assertEqual(self.result.status, 1)
        self.assertIn('IssueToken', str(self.result))

    def test_empty(self):
        result = TxResult(b'', 1, 21000, 1, [])
        self.assertEqual(result.events, [])
        self.assertFalse(result.has_event('Transfer'))
