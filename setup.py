from setuptools import find_packages, setup

setup(
    name="sourcesecure",
    version="1.0.0",
    license="GNU",
    description="command line tool to find leaked secrets in source trees, archives and git history",
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    keywords=["secrets", "security", "scanner", "credentials"],
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "typer>=0.9",
        "rich>=13.0",
        "httpx>=0.25",
        "PyYAML>=6.0",
        'tomli>=2.0; python_version < "3.11"',
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "sourcesecure=sourcesecure.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
