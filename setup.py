from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="adaptive-icon-converter",
    version="1.0.0",
    author="Adaptive Icon Converter Team",
    description="Convert Apple Icon Composer icons into Android Adaptive Icon resources",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["adaptive_icon", "adaptive_icon.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "adaptive-icon=adaptive_icon.cli.convert:main",
            "adaptive-icon-extract=adaptive_icon.cli.extract:main",
            "adaptive-icon-api=adaptive_icon.api_server:main",
        ],
    },
)
