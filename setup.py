"""Setup file for ldap-client application"""

from setuptools import find_packages, setup


setup(
    name="ldap-client",
    version="0.1.0",
    description="Command line client for searching an LDAP directory",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=["addict", "ldap3", "pyyaml"],
    extras_require={
        "dev": [
            "pre-commit",
            "pylint",
            "pytest",
            "pytest-cov",
            "pytest-mock",
            "pytest-pylint",
            "black",
        ],
    },
    python_requires=">=3.9",
    package_dir={"ldap_client": "ldap_client"},
    entry_points={
        "console_scripts": [
            "ldap-client = ldap_client.cli:main",
        ],
    },
)
