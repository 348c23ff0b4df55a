import json
import pathlib
import tempfile
from functools import lru_cache
from typing import Dict, Tuple, Optional

from solcx import compile_standard
from solcx.exceptions import SolcError

from hpbtoken import my_logging
from hpbtoken.config import cfg
from hpbtoken.utils.helpers import read_file, save_to_file, get_contract_names


class SolcException(Exception):
    """ Solc reported error """
    pass


def compile_solidity_json(sol_filename: str, optimizer_runs: Optional[int] = None,
                          output_selection: Tuple = ('abi', 'evm.bytecode', 'evm.deployedBytecode'),
                          evm_version: Optional[str] = None) -> Dict:
    """
    Compile the given solidity file using solc json interface with the provided options.

    :param sol_filename: path to solidity file
    :param optimizer_runs: controls the optimize-runs flag, negative values disable the optimizer (default: config value)
    :param output_selection: determines which fields are included in the compiler output dict
    :param evm_version: evm version to target (default: config value)
    :raise SolcException: if solc reports an error
    :return: dictionary with the compilation results according to output_selection
    """
    optimizer_runs = cfg.opt_solc_optimizer_runs if optimizer_runs is None else optimizer_runs
    evm_version = cfg.solc_evm_version if evm_version is None else evm_version

    solp = pathlib.Path(sol_filename)
    code = read_file(str(solp))
    json_in = {
        'language': 'Solidity',
        'sources': {
            solp.name: {
                'content': code
            }
        },
        'settings': {
            'evmVersion': evm_version,
            'outputSelection': {
                '*': {'*': list(output_selection)}
            },
        }
    }

    if optimizer_runs >= 0:
        json_in['settings']['optimizer'] = {
            'enabled': True,
            'runs': optimizer_runs
        }

    try:
        ret = compile_standard(json_in, solc_version=cfg.concrete_solc_version.lstrip('v'))
    except SolcError as e:
        raise SolcException(_error_report(solp.name, code, e)) from e

    for warning in ret.get('errors', []):
        my_logging.info(warning.get('formattedMessage', warning['message']))
    return ret


@lru_cache(maxsize=None)
def _compile_contract_cached(sol_filename: str, contract_name: str, settings: Tuple) -> Dict:
    solp = pathlib.Path(sol_filename)
    out = compile_solidity_json(sol_filename)
    try:
        jout = out['contracts'][solp.name][contract_name]
    except KeyError:
        raise SolcException(f'Contract "{contract_name}" not found in {solp.name}')
    return {
        'abi': jout['abi'],
        'bin': jout['evm']['bytecode']['object'],
        'deployed_bin': jout['evm']['deployedBytecode']['object']
    }


def compile_contract(sol_filename: str, contract_name: str) -> Dict:
    """
    Compile a single contract with the current configuration.

    Results are cached per file, contract and compiler settings.

    :param sol_filename: path to solidity file
    :param contract_name: contract within sol_filename
    :raise SolcException: if compilation fails or the contract does not exist
    :return: dict with 'abi', 'bin' (creation code) and 'deployed_bin' (runtime code)
    """
    if contract_name not in get_contract_names(sol_filename):
        raise SolcException(f'Contract "{contract_name}" not found in {sol_filename}')
    settings = tuple(sorted(cfg.export_compiler_settings().items()))
    return _compile_contract_cached(str(pathlib.Path(sol_filename).absolute()), contract_name, settings)


def compile_solidity_code(code: str) -> Dict:
    """
    Compile the given solidity code with default settings.

    :param code: code to compile
    :return: json compilation output
    """
    with tempfile.TemporaryDirectory() as d:
        return compile_solidity_json(save_to_file(d, 'contract.sol', code))


def _get_line_col(code: str, idx: int):
    """ Get line and column (1-based) from character index """
    line = len(code[:idx + 1].splitlines())
    col = (idx - (code[:idx + 1].rfind('\n') + 1)) + 1
    return line, col


def _error_report(sol_name: str, code: str, e: SolcError) -> str:
    try:
        errors = json.loads(e.stdout_data).get('errors', [])
    except (TypeError, ValueError):
        return str(e)

    report = ''
    for error in sorted(errors, key=lambda err: err.get('sourceLocation', {}).get('start', -1)):
        if error['severity'] != 'error':
            continue
        loc = error.get('sourceLocation')
        if loc is not None and loc['file'] == sol_name:
            line, column = _get_line_col(code, loc['start'])
            report += f'\n{sol_name}:{line}:{column}: {error["type"]}: {error["message"]}'
        else:
            report += f'\n{error["type"]}: {error["message"]}'
    return report if report else str(e)
