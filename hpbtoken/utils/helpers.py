import os
import re
from typing import Optional, List

WS_PATTERN = r'[ \t\r\n\u000C]'
ID_PATTERN = r'[a-zA-Z\$_][a-zA-Z0-9\$_]*'


def save_to_file(output_directory: Optional[str], filename: str, code: str):
    if output_directory is not None:
        target = os.path.join(output_directory, filename)
    else:
        target = filename
    with open(target, "w") as f:
        f.write(code)
    return target


def read_file(filename: str):
    with open(filename, 'r') as f:
        return f.read()


def get_contract_names(sol_filename: str) -> List[str]:
    s = read_file(sol_filename)
    matches = re.finditer(f'contract{WS_PATTERN}+({ID_PATTERN}){WS_PATTERN}*{{', s)
    return [m.group(1) for m in matches]


def normalized_hex(val) -> str:
    """Lower case hex string without 0x prefix for str, bytes or HexBytes input."""
    if not isinstance(val, str):
        val = bytes(val).hex()
    val = val[2:] if val.startswith('0x') else val
    return val.lower()
