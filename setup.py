from setuptools import setup, find_namespace_packages

setup(
    name="lrc-stream",
    version="0.1.0",
    description="Parse LRC lyrics from chunked byte sources and deliver them line by line, in time",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_namespace_packages(include=["lrc_stream", "lrc_stream.*"]),
    package_data={"lrc_stream": ["py.typed"]},
    install_requires=[
        "colorama>=0.4.6",
        "regex",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "lrc-stream=lrc_stream.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Text Processing",
    ],
    keywords="lyrics lrc parser timeline synchronized",
)
