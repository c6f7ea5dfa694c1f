from setuptools import setup, find_namespace_packages

setup(
    name="book_lending",
    version="0.1.0",
    packages=find_namespace_packages(include=['api*', 'cli*', 'core*']),
    include_package_data=True,
    package_data={
        'core.sa.migrations': ['script.py.mako'],
    },
    python_requires=">=3.11",
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "alembic",
        "fastapi",
        "pydantic>=2",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "book-lending=cli.main:main",
        ],
    },
)
