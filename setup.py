"""Setup configuration for e2e-automation package."""

from setuptools import setup, find_packages

setup(
    name="e2e-automation",
    version="0.1.0",
    description="Browser end-to-end test framework with Playwright, behave and Allure",
    packages=find_packages(exclude=["features", "features.*", "e2e_automation.tests*"]),
    python_requires=">=3.8",
    install_requires=[
        "playwright>=1.40.0",
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "rich>=13.0.0",
        "behave>=1.3.0",
        "allure-behave>=2.13.0",
        "allure-python-commons>=2.13.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
            "black>=23.0.0",
        ],
    },
)
