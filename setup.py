"""
Xorscope Setup Configuration
Repeating-key XOR cryptanalysis and ECB detection toolkit
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="xorscope",
    version="1.0.0",
    author="Xorscope Contributors",
    description="Repeating-key XOR cryptanalysis: keysize estimation, frequency analysis, ECB detection",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Topic :: Security :: Cryptography",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pycryptodome>=3.19.0",  # AES-ECB and PKCS#7
        "PyYAML>=6.0",           # Config files and YAML export
    ],
    extras_require={
        "api": ["fastapi>=0.104.0", "uvicorn>=0.24.0", "python-multipart>=0.0.6"],
        "test": ["pytest>=7.4.0", "httpx>=0.25.0", "fastapi>=0.104.0", "python-multipart>=0.0.6"],
        "all": ["fastapi>=0.104.0", "uvicorn>=0.24.0", "python-multipart>=0.0.6"],
    },
    entry_points={
        "console_scripts": [
            "xorscope=xorscope.cli:main",
            "xorscope-api=xorscope.interfaces.api:main",
        ],
    },
)
