from setuptools import find_packages, setup

setup(
    name="ledgergate",
    version="0.0.0",
    packages=find_packages(include=["ledgergate", "ledgergate.*"]),
    include_package_data=True,
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "cryptography",
        "requests",
        "click",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "ledgergate=ledgergate.cli:cli",
        ],
    },
)
