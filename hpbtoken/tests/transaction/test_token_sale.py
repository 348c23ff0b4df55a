from parameterized import parameterized

from hpbtoken.tests.hpb_unit_test import HpbTestCase
from hpbtoken.token_sale import HPBToken, to_wei, from_wei, SALE_STARTED, SALE_ENDED, INVALID_CALLER, \
    INVALID_STATE, ISSUE_TOKEN, TRANSFER, APPROVAL
from hpbtoken.transaction.interface import BlockChainError, IntegrityError
from hpbtoken.transaction.runtime import Runtime
from hpbtoken.transaction.types import AddressValue


class TestTokenSaleBase(HpbTestCase):
    blocks_per_phase = 10

    def setUp(self) -> None:
        super().setUp()
        Runtime.reset()
        self.api = Runtime.blockchain()
        self.owner, self.buyer, self.other = self.api.create_test_accounts(3)
        self.token = HPBToken.deploy(self.owner, blocks_per_phase=self.blocks_per_phase)

    def tearDown(self) -> None:
        Runtime.reset()
        super().tearDown()


class TestTokenSale(TestTokenSaleBase):

    def test_non_owner_cannot_start(self):
        result = self.token.start(100, self.buyer)
        self.assertTrue(result.has_event(INVALID_CALLER))
        self.assertFalse(result.has_event(SALE_STARTED))
        self.assertEqual(AddressValue(result.find_event(INVALID_CALLER)['caller']), self.buyer)
        self.assertFalse(self.token.sale_started())

    def test_no_purchase_before_start(self):
        balance_before = self.buyer.balance
        result = self.token.buy(self.buyer, to_wei(1))
        self.assertTrue(result.has_event(INVALID_STATE))
        self.assertFalse(result.has_event(ISSUE_TOKEN))
        self.assertEqual(result.find_event(INVALID_STATE)['reason'], 'Sale is not in progress')

        self.assertEqual(self.token.balance_of(self.buyer), 0)
        self.assertEqual(self.token.address.balance, 0)
        self.assertEqual(self.token.total_eth_received(), 0)
        # Only gas is lost
        self.assertGreater(self.buyer.balance, balance_before - to_wei(1))

    def test_owner_can_start(self):
        result = self.token.start(10, self.owner)
        self.assertTrue(result.has_event(SALE_STARTED))
        self.assertFalse(result.has_event(INVALID_CALLER))
        self.assertTrue(self.token.sale_started())
        self.assertTrue(self.token.sale_in_progress())
        self.assertFalse(self.token.sale_ended())
        self.assertEqual(self.token.compute_token_amount(to_wei(1)), to_wei(6000))

        info = self.token.sale_info()
        self.assertEqual(info['first_block'], result.block_number)
        self.assertEqual(info['last_block'], result.block_number + 10)

    def test_purchase_after_start(self):
        self.token.start(10, self.owner)
        target_balance = self.owner.balance

        result = self.token.buy(self.buyer, to_wei(1))
        self.assertEqual(result.event_names, [ISSUE_TOKEN, TRANSFER])
        issued = result.find_event(ISSUE_TOKEN)
        self.assertEqual(issued['index'], 0)
        self.assertEqual(AddressValue(issued['addr']), self.buyer)
        self.assertEqual(issued['ethAmount'], to_wei(1))
        self.assertEqual(issued['tokenAmount'], to_wei(6000))

        self.assertEqual(self.token.balance_of(self.buyer), to_wei(6000))
        self.assertEqual(from_wei(self.token.balance_of(self.buyer)), 6000)
        self.assertEqual(self.token.total_supply(), to_wei(6000))
        self.assertEqual(self.token.total_eth_received(), to_wei(1))

        # Proceeds are forwarded to the target
        self.assertEqual(self.token.address.balance, 0)
        self.assertEqual(self.owner.balance, target_balance + to_wei(1))

    def test_purchase_below_minimum(self):
        self.token.start(10, self.owner)
        with self.assertRaises(BlockChainError):
            self.token.buy(self.buyer, to_wei('0.009'))
        self.assertEqual(self.token.balance_of(self.buyer), 0)

    def test_start_twice(self):
        self.token.start(10, self.owner)
        result = self.token.start(10, self.owner)
        self.assertFalse(result.has_event(SALE_STARTED))
        self.assertEqual(result.find_event(INVALID_STATE)['reason'], 'Sale has already started')

    def test_start_without_duration(self):
        result = self.token.start(0, self.owner)
        self.assertFalse(result.has_event(SALE_STARTED))
        self.assertEqual(result.find_event(INVALID_STATE)['reason'], 'Sale duration must be positive')
        self.assertFalse(self.token.sale_started())

    def test_close(self):
        self.token.start(2, self.owner)
        result = self.token.close(self.owner)
        self.assertEqual(result.find_event(INVALID_STATE)['reason'], 'Sale has not ended')

        self.api.mine_blocks(3)
        self.assertTrue(self.token.sale_ended())
        self.assertTrue(self.token.close(self.buyer).has_event(INVALID_CALLER))

        result = self.token.close(self.owner)
        self.assertTrue(result.has_event(SALE_ENDED))
        self.assertTrue(self.token.sale_closed())
        self.assertFalse(self.token.sale_in_progress())

        result = self.token.close(self.owner)
        self.assertEqual(result.find_event(INVALID_STATE)['reason'], 'Sale has been closed')

    def test_purchase_after_end_refunded(self):
        self.token.start(2, self.owner)
        self.api.mine_blocks(3)
        result = self.token.buy(self.buyer, to_wei(1))
        self.assertTrue(result.has_event(INVALID_STATE))
        self.assertEqual(self.token.balance_of(self.buyer), 0)
        self.assertEqual(self.token.address.balance, 0)

    def test_issue_token_for_recipient(self):
        self.token.start(10, self.owner)
        result = self.token.issue_token(self.buyer, self.other, to_wei(2))
        self.assertTrue(result.has_event(ISSUE_TOKEN))
        self.assertEqual(self.token.balance_of(self.buyer), 0)
        self.assertEqual(self.token.balance_of(self.other), to_wei(12000))

    def test_token_info(self):
        info = self.token.token_info()
        self.assertEqual(info['name'], 'HPBCoin')
        self.assertEqual(info['symbol'], 'HPB')
        self.assertEqual(info['decimals'], 18)
        self.assertEqual(info['total_supply'], 0)
        self.assertEqual(self.token.target(), self.owner)


class TestTokenTransfers(TestTokenSaleBase):
    def setUp(self) -> None:
        super().setUp()
        self.token.start(100, self.owner)
        self.token.buy(self.buyer, to_wei(1))

    def test_transfer(self):
        result = self.token.transfer(self.buyer, self.other, to_wei(1000))
        event = result.find_event(TRANSFER)
        self.assertEqual(AddressValue(event['from']), self.buyer)
        self.assertEqual(AddressValue(event['to']), self.other)
        self.assertEqual(event['value'], to_wei(1000))
        self.assertEqual(self.token.balance_of(self.buyer), to_wei(5000))
        self.assertEqual(self.token.balance_of(self.other), to_wei(1000))

    def test_transfer_exceeding_balance(self):
        with self.assertRaises(BlockChainError):
            self.token.transfer(self.buyer, self.other, to_wei(6001))
        self.assertEqual(self.token.balance_of(self.buyer), to_wei(6000))

    def test_approve_and_transfer_from(self):
        result = self.token.approve(self.buyer, self.other, to_wei(100))
        self.assertTrue(result.has_event(APPROVAL))
        self.assertEqual(self.token.allowance(self.buyer, self.other), to_wei(100))

        self.token.transfer_from(self.other, self.buyer, self.owner, to_wei(60))
        self.assertEqual(self.token.allowance(self.buyer, self.other), to_wei(40))
        self.assertEqual(self.token.balance_of(self.owner), to_wei(60))

        with self.assertRaises(BlockChainError):
            self.token.transfer_from(self.other, self.buyer, self.owner, to_wei(41))


class TestBonusPhases(TestTokenSaleBase):
    blocks_per_phase = 10

    @parameterized.expand([
        ('phase_0', 0, 6000),
        ('phase_1', 14, 5750),
        ('phase_2', 24, 5500),
        ('phase_3', 34, 5250),
        ('phase_4', 44, 5000),
        ('past_last_phase', 100, 5000),
    ])
    def test_tokens_per_ether(self, _name, mined_blocks, expected_tokens):
        self.token.start(1000, self.owner)
        if mined_blocks:
            self.api.mine_blocks(mined_blocks)
        self.token.buy(self.buyer, to_wei(1))
        self.assertEqual(self.token.balance_of(self.buyer), to_wei(expected_tokens))


class TestDeployment(TestTokenSaleBase):

    def test_separate_target(self):
        token = HPBToken.deploy(self.owner, target=self.other, hard_cap=to_wei(5))
        self.assertEqual(token.target(), self.other)
        self.assertEqual(token.sale_info()['hard_cap'], to_wei(5))

        self.assertTrue(token.start(10, self.owner).has_event(INVALID_CALLER))
        self.assertTrue(token.start(10, self.other).has_event(SALE_STARTED))
        other_balance = self.other.balance
        token.buy(self.buyer, to_wei(1))
        self.assertEqual(self.other.balance, other_balance + to_wei(1))

    def test_test_accounts_exhausted(self):
        # Account 0 is reserved, three accounts are taken by setUp
        with self.assertRaises(ValueError):
            self.api.create_test_accounts(len(self.api.w3.eth.accounts) - 3)
        self.assertEqual(len(self.api.create_test_accounts(2)), 2)

    def test_invalid_constructor_args(self):
        with self.assertRaises(BlockChainError):
            HPBToken.deploy(self.owner, blocks_per_phase=0)

    def test_connect(self):
        self.token.start(10, self.owner)
        self.token.buy(self.buyer, to_wei(1))
        connected = HPBToken.connect(str(self.token.address))
        self.assertEqual(connected.address, self.token.address)
        self.assertEqual(connected.balance_of(self.buyer), to_wei(6000))

    def test_connect_to_account(self):
        with self.assertRaises(IntegrityError):
            HPBToken.connect(self.other)

    def test_plain_transfer_has_no_events(self):
        other_balance = self.other.balance
        result = self.api.transfer(self.buyer, self.other, to_wei(2))
        self.assertEqual(result.status, 1)
        self.assertEqual(result.events, [])
        self.assertEqual(self.other.balance, other_balance + to_wei(2))
