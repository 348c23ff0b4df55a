import os

from setuptools import setup, find_packages


def _read_file(path: str) -> str:
    with open(path) as f:
        return f.read().strip()


# Versions
file_dir = os.path.dirname(os.path.realpath(__file__))
hpbtoken_version = _read_file(os.path.join(file_dir, 'hpbtoken', 'VERSION'))
packages = find_packages(include=['hpbtoken', 'hpbtoken.*'])


setup(
    # Metadata
    name='hpbtoken',
    version=hpbtoken_version,
    license='MIT',
    description='Integration harness for the HPB token sale contract. The hpbtoken package compiles and deploys the '
                'sale contract, drives it through web3 (purchases, owner-gated sale start and close, ERC20 transfers) '
                'and checks the emitted events and token balances.',

    # Dependencies
    python_requires='>=3.8,<4',
    install_requires=[
        'web3[tester]>=6,<8',
        'py-solc-x>=2.0,<3',
        'appdirs>=1.4,<1.5',
        'argcomplete>=1,<4',
        'semantic-version>=2.8.4,<3',
    ],
    extras_require={
        'test': [
            'parameterized>=0.8',
            'pytest>=7',
        ],
    },

    # Contents
    packages=packages,
    package_data={
        'hpbtoken': ['VERSION', 'contracts/*.sol'],
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "hpbtoken=hpbtoken.__main__:main"
        ]
    },
)
