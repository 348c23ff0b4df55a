import io
import json
import os
import sys
import tempfile
from contextlib import redirect_stdout
from unittest.mock import patch

from hpbtoken.__main__ import main
from hpbtoken.config import cfg
from hpbtoken.config_user import UserConfig
from hpbtoken.tests.hpb_unit_test import HpbTestCase
from hpbtoken.token_sale import HPBToken
from hpbtoken.transaction.runtime import Runtime


class TestCommandLine(HpbTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.saved = {name: getattr(cfg, name) for name, prop in vars(UserConfig).items()
                      if isinstance(prop, property)}
        self.tmpdir = tempfile.TemporaryDirectory()
        self.cfg_file = os.path.join(self.tmpdir.name, 'config.json')

        Runtime.reset()
        self.api = Runtime.blockchain()
        # Node account indices 1 and 2
        self.owner, self.buyer = self.api.create_test_accounts(2)
        self.token = HPBToken.deploy(self.owner)
        self.output = ''

    def tearDown(self) -> None:
        Runtime.reset()
        self.tmpdir.cleanup()
        for name, val in self.saved.items():
            setattr(cfg, f'_{name}', val)
        super().tearDown()

    def run_main(self, *args) -> int:
        out = io.StringIO()
        try:
            with patch.object(sys, 'argv', ['hpbtoken', '--config-file', self.cfg_file, *args]), redirect_stdout(out):
                main()
        except SystemExit as e:
            return e.code
        finally:
            self.output = out.getvalue()
        return 0

    def test_start_by_owner(self):
        self.assertEqual(self.run_main('start', str(self.token.address), '10', '--account', str(self.owner)), 0)
        self.assertIn('SaleStarted', self.output)
        self.assertTrue(self.token.sale_started())

    def test_start_by_non_owner(self):
        self.assertEqual(self.run_main('start', str(self.token.address), '10', '--account', str(self.buyer)), 22)
        self.assertIn('InvalidCaller', self.output)
        self.assertFalse(self.token.sale_started())

    def test_account_index(self):
        self.assertEqual(self.run_main('start', str(self.token.address), '10', '--account', '2'), 22)
        self.assertEqual(self.run_main('start', str(self.token.address), '10', '--account', '1'), 0)

    def test_account_index_out_of_range(self):
        self.assertEqual(self.run_main('start', str(self.token.address), '10', '--account', '99'), 12)

    def test_buy_invalid_amount(self):
        self.assertEqual(self.run_main('buy', str(self.token.address), 'lots', '--account', str(self.buyer)), 11)
        self.assertIn('invalid ether amount', self.output)

    def test_buy_before_start(self):
        self.assertEqual(self.run_main('buy', str(self.token.address), '1', '--account', str(self.buyer)), 22)
        self.assertIn('InvalidState', self.output)

    def test_balance(self):
        self.assertEqual(self.run_main('balance', str(self.token.address), str(self.buyer)), 0)
        self.assertIn(f'{self.buyer}: 0', self.output)

    def test_invalid_addresses(self):
        self.assertEqual(self.run_main('balance', str(self.token.address), '0x12'), 14)
        self.assertEqual(self.run_main('info', 'deadbeef'), 14)
        self.assertEqual(self.run_main('start', str(self.token.address), '10', '--account', 'abc'), 14)
        self.assertEqual(self.run_main('balance', str(self.token.address), '0x' + '1' * 42), 14)

    def test_connect_to_account(self):
        self.assertEqual(self.run_main('info', str(self.buyer)), 13)

    def test_incompatible_solc(self):
        self.assertEqual(self.run_main('deploy', '--account', str(self.owner), '--solc-version', 'v0.7.6'), 10)
        self.assertIn('ERROR', self.output)

    def test_invalid_config_file(self):
        with open(self.cfg_file, 'w') as f:
            json.dump({'sale_blocks_per_phase': 0}, f)
        self.assertEqual(self.run_main('info', str(self.token.address)), 42)
        self.assertIn('sale_blocks_per_phase', self.output)
