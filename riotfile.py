# type: ignore
from typing import List  # noqa
from typing import Tuple  # noqa

from riot import Venv


latest = ""


SUPPORTED_PYTHON_VERSIONS: List[Tuple[int, int]] = [
    (3, 8),
    (3, 9),
    (3, 10),
    (3, 11),
    (3, 12),
    (3, 13),
]  # type: List[Tuple[int, int]]


def version_to_str(version: Tuple[int, int]) -> str:
    """Convert a Python version tuple to a string

    >>> version_to_str((3, 8))
    '3.8'
    >>> version_to_str((3, ))
    '3'
    """
    return ".".join(str(p) for p in version)


def str_to_version(version: str) -> Tuple[int, int]:
    """Convert a Python version string to a tuple

    >>> str_to_version("3.10")
    (3, 10)
    >>> str_to_version("3")
    (3,)
    """
    return tuple(int(p) for p in version.split("."))


MIN_PYTHON_VERSION = version_to_str(min(SUPPORTED_PYTHON_VERSIONS))
MAX_PYTHON_VERSION = version_to_str(max(SUPPORTED_PYTHON_VERSIONS))


def select_pys(min_version: str = MIN_PYTHON_VERSION, max_version: str = MAX_PYTHON_VERSION) -> List[str]:
    """Helper to select python versions from the list of versions we support

    >>> select_pys()
    ['3.8', '3.9', '3.10', '3.11', '3.12', '3.13']
    >>> select_pys(min_version='3.8', max_version='3.9')
    ['3.8', '3.9']
    """
    min_version = str_to_version(min_version)
    max_version = str_to_version(max_version)

    return [version_to_str(version) for version in SUPPORTED_PYTHON_VERSIONS if min_version <= version <= max_version]


venv = Venv(
    pkgs={
        "pytest": latest,
        "pytest-randomly": latest,
        "coverage": latest,
        "pytest-cov": latest,
    },
    env={
        "DD_REMOTE_CONFIGURATION_ENABLED": "false",
        "DD_INSTRUMENTATION_TELEMETRY_ENABLED": "false",
    },
    venvs=[
        Venv(
            name="monkey",
            pys=select_pys(),
            command="pytest {cmdargs} tests/test_monkey.py tests/test_formats.py",
        ),
        Venv(
            name="bottle",
            command="pytest {cmdargs} tests/contrib/bottle/",
            pkgs={
                "WebTest": latest,
            },
            venvs=[
                Venv(
                    pys=select_pys(max_version="3.12"),
                    pkgs={"bottle": [">=0.12,<0.13", latest]},
                ),
                Venv(
                    pys=select_pys(min_version="3.13"),
                    pkgs={"bottle": latest},
                ),
            ],
        ),
        Venv(
            name="redis",
            command="pytest {cmdargs} tests/contrib/redis",
            pkgs={
                "pytest-asyncio": latest,
            },
            venvs=[
                Venv(
                    pys=select_pys(max_version="3.10"),
                    pkgs={"redis": ["~=4.3", "==5.0.1", latest]},
                ),
                Venv(
                    # redis added support for Python 3.11 in 4.3
                    pys=select_pys(min_version="3.11"),
                    pkgs={"redis": ["~=4.3", latest]},
                ),
            ],
        ),
        Venv(
            name="pymongo",
            command="pytest {cmdargs} tests/contrib/pymongo",
            venvs=[
                Venv(
                    pys=select_pys(max_version="3.9"),
                    pkgs={"pymongo": ["~=4.0", latest]},
                ),
                Venv(
                    pys=select_pys(min_version="3.10"),
                    pkgs={"pymongo": ["~=4.2", latest]},
                ),
            ],
        ),
    ],
)
