# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- STATE & CONFIG ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- THEME ---
    "jinja2>=3.0.0",   # Stylesheet rendering

    # --- DATABASE ---
    "duckdb>=0.10.0",  # Per-device settings slots

    # --- UTILS ---
    "httpx>=0.27.0",   # Wiki server client
]

extras_require = {
    # --- TESTS ---
    "test": [
        "pytest",
        "pytest-asyncio>=0.23.0",
    ],
}

setup(
    name="freeki-client",
    version="0.1.0",
    description="FreeKi|Client state engine",
    packages=find_packages(include=["freeki", "freeki.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "freeki-client=freeki.client.main:main",
        ],
    },
    python_requires=">=3.11",
)
