# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="treedigest",
    version="0.1.0",
    description="Content-fingerprinting manifest generator for directory trees",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["treedigest*"]),
    python_requires=">=3.9",  # ThreadPoolExecutor.shutdown(cancel_futures=...)
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'treedigest=treedigest.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
