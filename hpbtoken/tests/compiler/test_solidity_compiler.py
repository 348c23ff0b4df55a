from hpbtoken.compiler.solidity.compiler import compile_solidity_code, compile_solidity_json, compile_contract, \
    SolcException, _get_line_col
from hpbtoken.contracts import token_contract_file, token_contract_name
from hpbtoken.tests.hpb_unit_test import HpbTestCase

simple_storage = """
pragma solidity ^0.8.0;

contract SimpleStorage {
    uint storedData;

    function set(uint x) public {
        storedData = x;
    }

    function get() public view returns (uint) {
        return storedData;
    }
}"""

broken_storage = """
pragma solidity ^0.8.0;

contract BrokenStorage {
    function get() public view returns (uint) {
        return storedData;
    }
}"""


class TestCompileSolidity(HpbTestCase):

    def test_compile_solidity(self):
        compile_output = compile_solidity_code(simple_storage)
        self.assertIsNotNone(compile_output)
        contracts = list(compile_output['contracts'].values())[0]
        self.assertIn('SimpleStorage', contracts)

    def test_compile_error(self):
        with self.assertRaises(SolcException) as ctx:
            compile_solidity_code(broken_storage)
        self.assertIn('DeclarationError', str(ctx.exception))

    def test_compile_token_json(self):
        compile_output = compile_solidity_json(token_contract_file, optimizer_runs=-1)
        self.assertIn(token_contract_name, compile_output['contracts']['HPBToken.sol'])

    def test_compile_token(self):
        cout = compile_contract(token_contract_file, token_contract_name)
        self.assertEqual(set(cout.keys()), {'abi', 'bin', 'deployed_bin'})
        self.assertTrue(cout['bin'])
        self.assertTrue(cout['deployed_bin'])

        abi_names = {entry.get('name') for entry in cout['abi']}
        for name in ['target', 'start', 'balanceOf', 'issueToken', 'SaleStarted', 'InvalidCaller', 'InvalidState']:
            self.assertIn(name, abi_names)

        # Cached per settings
        self.assertIs(cout, compile_contract(token_contract_file, token_contract_name))

    def test_missing_contract(self):
        with self.assertRaises(SolcException):
            compile_contract(token_contract_file, 'NoSuchToken')

    def test_line_col(self):
        code = 'ab\ncd\nef'
        self.assertEqual(_get_line_col(code, 0), (1, 1))
        self.assertEqual(_get_line_col(code, 4), (2, 2))
        self.assertEqual(_get_line_col(code, 6), (3, 1))
