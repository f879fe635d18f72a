from pathlib import Path
from setuptools import setup, find_packages

ROOT_DIR = Path(__file__).parent
README = (ROOT_DIR / "README.md").read_text(encoding="utf-8")

setup(
    name="mcpanything",
    version="0.1.0",
    description="Bind any Python method to MCP tool, prompt, resource and notification handlers",
    long_description=README,
    long_description_content_type="text/markdown",
    author="mcpanything",
    license="MIT",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=["pydantic>=2"],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
)
