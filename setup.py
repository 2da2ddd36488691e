#!/usr/bin/env python
"""
Setup script for seq2seq-gen - autoregressive decoding for encoder-decoder models
"""

from setuptools import setup, find_packages
import os
import re

# Read the version from the package __init__.py file
with open(os.path.join("seq2seq_gen", "__init__.py"), "r") as f:
    version_match = re.search(r"__version__\s*=\s*['\"]([^'\"]*)['\"]", f.read())
    version = version_match.group(1) if version_match else "0.1.0"

long_description = ""
content_type = "text/markdown"
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()

# Define dependencies
install_requires = [
    "torch>=2.0.0",
    "transformers>=4.30.0",
    "numpy>=1.23.0",
    "tqdm>=4.65.0",
]

# Optional dependencies
extras_require = {
    "dev": [
        "pytest>=7.3.1",
        "pytest-asyncio>=0.21.0",
        "pytest-cov>=4.1.0",
        "black>=23.3.0",
        "isort>=5.12.0",
    ],
    "test": [
        "pytest>=7.3.1",
        "pytest-asyncio>=0.21.0",
        "pytest-cov>=4.1.0",
    ],
    "onnx": [
        "onnxruntime>=1.15.0",
    ],
}

setup(
    name="seq2seq-gen",
    version=version,
    description="Autoregressive greedy and top-k decoding for encoder-decoder language models",
    long_description=long_description,
    long_description_content_type=content_type,
    packages=find_packages(include=["seq2seq_gen", "seq2seq_gen.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    include_package_data=True,
    zip_safe=False,
    keywords=[
        "nlp",
        "transformers",
        "seq2seq",
        "text-generation",
        "top-k-sampling",
    ],
)
