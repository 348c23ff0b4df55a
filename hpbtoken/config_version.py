"""
This module defines pinned versions and is used internally to configure the concrete solc version to use
"""
import os

from semantic_version import NpmSpec, Version


class Versions:
    HPB_SOLC_VERSION_COMPATIBILITY = NpmSpec('^0.8.0')

    # Last release which defaults to the paris evm (no PUSH0 opcode)
    HPB_DEFAULT_SOLC_VERSION = '0.8.19'
    SOLC_VERSION = None

    # Read hpbtoken version from VERSION file
    with open(os.path.join(os.path.realpath(os.path.dirname(__file__)), 'VERSION')) as f:
        HPBTOKEN_VERSION = f.read().strip()

    @staticmethod
    def set_solc_version(version: str):
        version = version[1:] if version.startswith('v') else version

        import solcx
        from solcx.exceptions import SolcNotInstalled
        try:
            v = Version(version)
            if not Versions.HPB_SOLC_VERSION_COMPATIBILITY.match(v):
                raise ValueError(f'hpbtoken only supports solc versions satisfying {Versions.HPB_SOLC_VERSION_COMPATIBILITY.expression}')
            solcx.set_solc_version(version, silent=True)
        except ValueError as e:
            raise ValueError(f'Invalid version string {version}\n{e}')
        except SolcNotInstalled:
            try:
                solcx.install_solc(version)
                solcx.set_solc_version(version, silent=True)
            except Exception as e:
                raise ValueError(f'Error while trying to install solc version {version}\n{e.args}')

        Versions.SOLC_VERSION = f'v{version}'
