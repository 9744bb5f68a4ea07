"""
Super Admin Console Service

Backend for the operator dashboard of the multi-tenant SaaS product:
organization browsing, feature flags, support tickets, error logs and
organization deprovisioning.
"""

from setuptools import setup, find_packages

setup(
    name="superadmin-console",
    version="1.0.0",
    description="Super Admin Console Service",
    author="Platform Operations",
    packages=find_packages(include=["superadmin", "superadmin.*"]),
    python_requires=">=3.11",
    install_requires=[
        # Web framework
        "fastapi>=0.110.0",
        "uvicorn[standard]>=0.27.0",
        "pydantic[email]>=2.5.0",
        "pydantic-settings>=2.1.0",

        # PostgreSQL support
        "sqlalchemy[asyncio]>=2.0.25",
        "asyncpg>=0.29.0",
        "psycopg2-binary>=2.9.9",

        # Database migrations
        "alembic>=1.13.0",

        # Caller tokens and identity provider admin API
        "python-jose[cryptography]>=3.3.0",
        "httpx>=0.26.0",

        # Monitoring and observability
        "sentry-sdk[fastapi]>=1.39.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "aiosqlite>=0.19.0",
            "black>=23.10.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.11",
        "License :: Other/Proprietary License",
    ],
)
