from pathlib import Path

from setuptools import find_packages, setup  # isort: skip


HERE = Path(__file__).resolve().parent


def get_long_description():
    readme = HERE / "README.md"
    if readme.is_file():
        return readme.read_text(encoding="utf-8")
    return "Tracing hooks for bottle, redis and pymongo built on ddtrace."


setup(
    name="ddtrace-hooks",
    version="0.1.0",
    description="Tracing hooks for bottle, redis and pymongo built on ddtrace",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="BSD-3-Clause",
    packages=find_packages(exclude=["tests*"]),
    python_requires=">=3.8",
    install_requires=[
        "ddtrace>=3.0,<4",
        "wrapt>=1.14",
    ],
    extras_require={
        "bottle": ["bottle>=0.12"],
        "redis": ["redis>=4.2"],
        "pymongo": ["pymongo>=4.0"],
        "test": [
            "bottle>=0.12",
            "pymongo>=4.0",
            "pytest",
            "pytest-asyncio",
            "redis>=4.2",
            "riot",
            "webtest",
        ],
    },
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3 :: Only",
        "Framework :: Bottle",
        "Topic :: System :: Monitoring",
    ],
)
