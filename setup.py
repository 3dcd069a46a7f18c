"""setup.py

Setup script for the tablereplicator library

Notes
-----

- Replaces the need for requirements.txt


"""
import pathlib
from setuptools import setup

# The directory containing this file
HERE = pathlib.Path(__file__).parent

# The text of the README file
README = (HERE / "README.md").read_text()

# This call to setup() does all the work
setup(
    name="tablereplicator",
    version="0.1.0",
    description="Copy database tables to destination tables in fixed-size pages.",
    long_description=README,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Database",
    ],
    python_requires='>=3.10',
    packages=["tablereplicator", "tablereplicator.db_helpers"],
    include_package_data=True,
    install_requires=['typing-extensions'],
    extras_require={
        'dev': ['flake8',
                'ipdb',
                'ipython',
                'pytest',
                'pytest-cov',
                ],
        'mssql': ['pyodbc'],
        'postgres': ['psycopg2-binary']},
    entry_points={
        "console_scripts": [
            "replicate_tables=tablereplicator.cli:main",
        ]
    },
)
