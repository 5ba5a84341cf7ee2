"""Setup script for the geochild registry package following Cosmic Python pattern."""

from setuptools import setup, find_namespace_packages

setup(
    name="geochild-registry",
    version="1.0.0",
    description="GeoChild - children-with-disability case capture for the Maputo pilot",
    author="GeoChild Pilot Team",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["shared*", "registry*", "geolocation*", "insights*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn[standard]",
        "pydantic>=2",
        "redis",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "pytest-cov",
            "httpx",
            "fakeredis",
        ],
        "dev": [
            "black",
            "flake8",
            "mypy",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
    ],
)
