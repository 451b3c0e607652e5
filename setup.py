"""
Setup script for the agentlint package.
"""

from setuptools import setup, find_packages
import os

# Read the README
readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
if os.path.exists(readme_path):
    with open(readme_path, 'r', encoding='utf-8') as f:
        long_description = f.read()
else:
    long_description = "Linter and auto-fixer for code written by AI coding agents."

setup(
    name="agentlint",
    version="0.7.0",
    author="agentlint contributors",
    description="Linter and auto-fixer for risky patterns in AI-agent-written code",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/alexmelges/agentlint",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "black>=23.0",
            "mypy>=1.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "agentlint=agentlint.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Quality Assurance",
    ],
    keywords="linter, static-analysis, ai-agents, code-quality, sarif, diff",
    project_urls={
        "Bug Reports": "https://github.com/alexmelges/agentlint/issues",
        "Source": "https://github.com/alexmelges/agentlint",
    },
)
