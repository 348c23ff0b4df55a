#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK
import argcomplete
import argparse

from argcomplete.completers import FilesCompleter

from hpbtoken.compiler.solidity.compiler import SolcException
from hpbtoken.config_user import UserConfig
from hpbtoken.transaction.interface import BlockChainError, IntegrityError
from hpbtoken.utils.progress_printer import fail_print, success_print, warn_print


def parse_config_doc():
    import textwrap
    from typing import get_type_hints
    __ucfg = UserConfig()

    docs = {}
    for name, prop in vars(UserConfig).items():
        if name.startswith('_') or not isinstance(prop, property):
            continue
        t = get_type_hints(prop.fget)['return']
        doc = prop.__doc__
        choices = None
        if hasattr(__ucfg, f'_{name}_values'):
            choices = getattr(__ucfg, f'_{name}_values')
        default_val = getattr(__ucfg, name)
        docs[name] = (
            f"type: {t}\n\n"
            f"{textwrap.dedent(doc).strip()}\n\n"
            f"Default value: {default_val}", t, default_val, choices)
    return docs


def parse_arguments():
    class ShowSuppressedInHelpFormatter(argparse.RawTextHelpFormatter):
        def add_usage(self, usage, actions, groups, prefix=None):
            if usage is not argparse.SUPPRESS:
                actions = [action for action in actions if action.metavar != '<cfg_val>']
                args = usage, actions, groups, prefix
                self._add_item(self._format_usage, args)

    main_parser = argparse.ArgumentParser(prog='hpbtoken')
    config_files = ('json', )

    msg = 'Path to local configuration file (defaults to "config.json" in cwd). ' \
          'This file (if it exists), overrides settings defined in the global configuration.'
    main_parser.add_argument('--config-file', default='config.json', metavar='<config_file>', help=msg).completer = FilesCompleter(config_files)

    # Shared 'config' parser
    config_parser = argparse.ArgumentParser(add_help=False)
    msg = 'These parameters can be used to override settings defined (and documented) in config_user.py'
    cfg_group = config_parser.add_argument_group(title='Configuration Options', description=msg)

    # Expose config_user.py options via command line arguments, they are supported in all parsers
    cfg_docs = parse_config_doc()

    def add_config_args(parser, arg_names):
        for name in arg_names:
            doc, t, defval, choices = cfg_docs[name]

            if t is bool:
                if defval:
                    parser.add_argument(f'--no-{name.replace("_", "-")}', dest=name, help=doc, action='store_false')
                else:
                    parser.add_argument(f'--{name.replace("_", "-")}', dest=name, help=doc, action='store_true')
            elif t is int:
                parser.add_argument(f'--{name.replace("_", "-")}', type=int, dest=name, metavar='<cfg_val>', help=doc)
            else:
                parser.add_argument(f'--{name.replace("_", "-")}', dest=name, metavar='<cfg_val>', help=doc,
                                    choices=choices)
    add_config_args(cfg_group, cfg_docs.keys())

    subparsers = main_parser.add_subparsers(title='actions', dest='cmd', required=True)

    # Sender options shared by all transaction issuing commands
    sender_parser = argparse.ArgumentParser(add_help=False)
    sender_parser.add_argument('--account', help='Sender blockchain address (default: blockchain_default_account)', metavar='<address>')
    sender_parser.add_argument('--log', action='store_true', help='enable logging')

    # Parsers for commands which operate on a deployed token sale
    contract_parser = argparse.ArgumentParser(add_help=False)
    contract_parser.add_argument('address', help='Blockchain address of the deployed token sale', metavar='<contract_address>')

    # 'deploy' parser
    deploy_parser = subparsers.add_parser('deploy', parents=[sender_parser, config_parser],
                                          help='Deploy a new token sale contract.', formatter_class=ShowSuppressedInHelpFormatter)
    deploy_parser.add_argument('--target', help='Sale owner and receiver of the proceeds (default: sender)', metavar='<address>')

    # 'info' parser
    subparsers.add_parser('info', parents=[contract_parser, config_parser],
                          help='Show token and sale state of a deployed contract.', formatter_class=ShowSuppressedInHelpFormatter)

    # 'start' parser
    start_parser = subparsers.add_parser('start', parents=[contract_parser, sender_parser, config_parser],
                                         help='Start the sale (owner only).', formatter_class=ShowSuppressedInHelpFormatter)
    start_parser.add_argument('duration', type=int, help='Sale duration in blocks', metavar='<blocks>')

    # 'buy' parser
    buy_parser = subparsers.add_parser('buy', parents=[contract_parser, sender_parser, config_parser],
                                       help='Purchase tokens by sending ether to the contract.', formatter_class=ShowSuppressedInHelpFormatter)
    buy_parser.add_argument('amount', help='Amount of ether to send', metavar='<ether>')

    # 'balance' parser
    balance_parser = subparsers.add_parser('balance', parents=[contract_parser, config_parser],
                                           help='Show the token balance of an account.', formatter_class=ShowSuppressedInHelpFormatter)
    balance_parser.add_argument('holder', help='Account address', metavar='<address>')

    # 'close' parser
    subparsers.add_parser('close', parents=[contract_parser, sender_parser, config_parser],
                          help='Close an ended sale (owner only).', formatter_class=ShowSuppressedInHelpFormatter)

    # 'check' parser
    subparsers.add_parser('check', parents=[config_parser],
                          help='Run all token sale scenarios against the configured (debug) backend.',
                          formatter_class=ShowSuppressedInHelpFormatter)

    # 'update-solc' parser
    msg = 'Install a solc version (default: the pinned version for this hpbtoken release).'
    solc_parser = subparsers.add_parser('update-solc', help=msg)
    solc_parser.add_argument('version', nargs='?', help='solc version (e.g. v0.8.19)', metavar='<version>')

    # parse
    argcomplete.autocomplete(main_parser, always_complete_options=False)
    a = main_parser.parse_args()
    return a


def _address(val: str, what: str):
    from hpbtoken.transaction.types import AddressValue
    try:
        return AddressValue(val)
    except ValueError as e:
        with fail_print():
            print(f'ERROR: invalid {what} address\n{e}')
        exit(14)


def _sender(a):
    from hpbtoken.config import cfg
    from hpbtoken.transaction.runtime import Runtime
    if a.account is not None and not a.account.isdigit():
        return _address(a.account, 'sender')
    if a.account is not None:
        # Account index on the node, same as blockchain_default_account
        cfg.blockchain_default_account = int(a.account)
    me = Runtime.blockchain().default_address
    if me is None:
        with fail_print():
            print('ERROR: No sender account specified (use --account or configure blockchain_default_account)')
        exit(20)
    return me


def _report(result, failure_events):
    print(f'Transaction mined in block {result.block_number}, gas used: {result.gas_used}')
    for event in result.events:
        print(f'  {event}')
    failed = [name for name in failure_events if result.has_event(name)]
    if failed:
        with fail_print():
            print(f'ERROR: Contract rejected the request ({", ".join(failed)})')
        exit(22)


def _run_scenarios() -> bool:
    import unittest
    from hpbtoken.examples.scenario import run_scenario
    from hpbtoken.examples.scenarios import all_scenarios

    class ScenarioCheck(unittest.TestCase):
        def __init__(self, name, scenario):
            super().__init__()
            self.name = name
            self.scenario = scenario

        def runTest(self):
            run_scenario(self, self.scenario)

        def __str__(self):
            return self.name

    suite = unittest.TestSuite([ScenarioCheck(name, scenario) for name, scenario in all_scenarios])
    return unittest.TextTestRunner(verbosity=2).run(suite).wasSuccessful()


def main():
    # parse arguments
    a = parse_arguments()

    from decimal import Decimal, InvalidOperation

    from hpbtoken import my_logging
    from hpbtoken.config import cfg
    from hpbtoken.config_version import Versions
    from hpbtoken.my_logging.log_context import log_context
    from hpbtoken.token_sale import HPBToken, to_wei, INVALID_CALLER, INVALID_STATE
    from hpbtoken.transaction.runtime import Runtime

    if a.cmd == 'update-solc':
        version = Versions.HPB_DEFAULT_SOLC_VERSION if a.version is None else a.version
        try:
            Versions.set_solc_version(version)
        except ValueError as e:
            with fail_print():
                print(f'ERROR: {e}')
            exit(10)
        with success_print():
            print(f'Using solc {Versions.SOLC_VERSION}')
        exit(0)

    # Load configuration files
    try:
        cfg.load_configuration_from_disk(a.config_file)
    except Exception as e:
        with fail_print():
            print(f"ERROR: Failed to load configuration files\n{e}")
            exit(42)

    # Support for overriding any user config setting via command line
    # The evaluation order for configuration loading is:
    # Default values in config.py -> Site config.json -> user config.json -> local config.json -> cmdline arguments
    # Settings defined at a later stage override setting values defined at an earlier stage
    override_dict = {}
    for name in vars(UserConfig):
        if name[0] != '_' and hasattr(a, name):
            val = getattr(a, name)
            if val is not None:
                override_dict[name] = val
    try:
        cfg.override_defaults(override_dict)
    except ValueError as e:
        with fail_print():
            print(f'ERROR: {e}')
        exit(42)

    # Enable logging
    if getattr(a, 'log', False):
        log_file = my_logging.get_log_file(filename=f'transactions_{a.cmd}', include_timestamp=True, label=None)
        my_logging.prepare_logger(log_file)

    if a.cmd == 'check':
        if not Runtime.blockchain().is_debug_backend():
            with warn_print():
                print(f'Backend {cfg.blockchain_backend} has no pre-funded test accounts, scenarios may fail')
        if not _run_scenarios():
            with fail_print():
                print('ERROR: Some scenarios failed')
            exit(30)
    else:
        # Validate user input before touching the chain
        amount = None
        if a.cmd == 'buy':
            try:
                amount = to_wei(Decimal(a.amount))
            except (InvalidOperation, ValueError) as e:
                with fail_print():
                    print(f'ERROR: invalid ether amount {a.amount}\n{e}')
                exit(11)
        contract_address = None if a.cmd == 'deploy' else _address(a.address, 'contract')
        target = None if getattr(a, 'target', None) is None else _address(a.target, 'target')
        holder = _address(a.holder, 'holder') if a.cmd == 'balance' else None

        try:
            with log_context(a.cmd):
                if a.cmd == 'deploy':
                    token = HPBToken.deploy(_sender(a), target=target)
                    print(f'Deployed token sale at: {token.address}')
                else:
                    token = HPBToken.connect(contract_address)
                    if a.cmd == 'info':
                        for key, val in token.token_info().items():
                            print(f'{key}: {val}')
                        for key, val in token.sale_info().items():
                            print(f'{key}: {val}')
                    elif a.cmd == 'balance':
                        print(f'{holder}: {token.balance_of(holder)}')
                    elif a.cmd == 'start':
                        _report(token.start(a.duration, _sender(a)), [INVALID_CALLER, INVALID_STATE])
                    elif a.cmd == 'buy':
                        _report(token.buy(_sender(a), amount), [INVALID_STATE])
                    elif a.cmd == 'close':
                        _report(token.close(_sender(a)), [INVALID_CALLER, INVALID_STATE])
                    else:
                        raise NotImplementedError(a.cmd)
        except IntegrityError as e:
            with fail_print():
                print(f'ERROR: failed to connect to contract\n{e}')
            exit(13)
        except BlockChainError as e:
            with fail_print():
                print(f'ERROR: blockchain interaction failed\n{e}')
            exit(12)
        except SolcException as e:
            with fail_print():
                print(f'ERROR: failed to compile the token contract\n{e}')
            exit(3)
        except ValueError as e:
            # solc version activation or installation failed
            with fail_print():
                print(f'ERROR: {e}')
            exit(10)

    with success_print():
        print("Finished successfully")


if __name__ == '__main__':
    main()
