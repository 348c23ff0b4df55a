import json
import os
from typing import Dict, Any

from hpbtoken.config_user import UserConfig
from hpbtoken.config_version import Versions


def hpb_print(*args, verbosity_level=1, **kwargs):
    if (verbosity_level <= cfg.verbosity) and not cfg.is_unit_test:
        print(*args, **kwargs)


def hpb_print_banner(title: str):
    l = len(title) + 4
    hpb_print(f'{"#"*l}\n# {title} #\n{"#"*l}\n')


class Config(UserConfig):
    def __init__(self):
        super().__init__()

        # Internal values

        self._options_with_effect_on_bytecode = [
            'solc_version', 'solc_evm_version', 'opt_solc_optimizer_runs',
        ]

        self._is_unit_test = False

    def _load_cfg_file_if_exists(self, filename):
        if os.path.exists(filename):
            with open(filename) as conf:
                try:
                    self.override_defaults(json.load(conf))
                except ValueError as e:
                    raise ValueError(f'{e} (in file "{filename}")')

    def load_configuration_from_disk(self, local_cfg_file: str):
        # Load global configuration file
        global_config_dir = self._appdirs.site_config_dir
        global_cfg_file = os.path.join(global_config_dir, 'config.json')
        self._load_cfg_file_if_exists(global_cfg_file)

        # Load user configuration file
        user_config_dir = self._appdirs.user_config_dir
        user_cfg_file = os.path.join(user_config_dir, 'config.json')
        self._load_cfg_file_if_exists(user_cfg_file)

        # Load local configuration file
        self._load_cfg_file_if_exists(local_cfg_file)

    def override_defaults(self, overrides: Dict[str, Any]):
        for arg, val in overrides.items():
            if not hasattr(self, arg):
                raise ValueError(f'Tried to override non-existing config value {arg}')
            try:
                setattr(self, arg, val)
            except ValueError as e:
                raise ValueError(f'{e} (for entry "{arg}")')

    def export_compiler_settings(self) -> dict:
        out = {}
        for k in self._options_with_effect_on_bytecode:
            out[k] = getattr(self, k)
        return out

    @property
    def hpbtoken_version(self) -> str:
        """hpbtoken version number"""
        return Versions.HPBTOKEN_VERSION

    @property
    def concrete_solc_version(self) -> str:
        """Configured solc version, installed and activated on first access."""
        if Versions.SOLC_VERSION is None or Versions.SOLC_VERSION.lstrip('v') != self.solc_version.lstrip('v'):
            Versions.set_solc_version(self.solc_version)
        return Versions.SOLC_VERSION

    @property
    def is_unit_test(self) -> bool:
        return self._is_unit_test

    @is_unit_test.setter
    def is_unit_test(self, val: bool):
        self._is_unit_test = val


cfg = Config()
