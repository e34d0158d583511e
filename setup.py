# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="figma-i18n-sync",
    version="0.1.0",
    description="Extract Figma UI text, generate stable i18n keys and translate locale files with Claude",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["figma_i18n", "figma_i18n.*"]),
    install_requires=[
        "anthropic>=0.40",
        "requests>=2.31",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.25",
        ],
    },
    entry_points={
        'console_scripts': [
            'figma-i18n=figma_i18n.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
