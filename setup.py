# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="codeshaper",
    version="1.0.0",
    description="Minify and beautify source code for many languages, from the CLI or as a library",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["codeshaper", "codeshaper.*"]),
    package_data={"codeshaper.interface": ["locales/*.json"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "tiktoken",  # Token estimates in transform statistics
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'codeshaper=codeshaper.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
