"""Install the community council accounts package."""

from setuptools import setup, find_packages

setup(
    name='council-accounts',
    version='0.1.0',
    packages=find_packages(include=['council_accounts', 'council_accounts.*']),
    package_data={'council_accounts': ['config.py']},
    python_requires='>=3.9',
    install_requires=[
        "flask",
        "werkzeug",
        "wtforms",
        "sqlalchemy>=2.0",
        "bcrypt",
        "pyjwt>=2.0",
        "pytz",
        "retry",
        "click",
        "python-json-logger>=3.1",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "council-accounts=council_accounts.create_user:cli",
        ],
    },
    zip_safe=False
)
