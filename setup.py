from setuptools import setup, find_packages

setup(
    name="site-targets",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "python-dotenv>=1.0.1",
        "click>=8.1.8",
        "rich>=13.7.1",
        "pydantic>=2.10.6",
    ],
    entry_points={
        'console_scripts': [
            'sitetargets=sitetargets.cli:main',
        ],
    },
    author="nickpending",
    author_email="rudy@voidwire.info",
    description="Combine web server sites into one certificate request and split stored requests back into sites",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Intended Audience :: System Administrators",
        "Topic :: Security",
        "Topic :: Internet :: WWW/HTTP",
        "Development Status :: 3 - Alpha",
    ],
    python_requires=">=3.8",
    extras_require={
        "dev": [
            "black>=24.10.0",
            "isort>=6.0.1",
            "mypy>=1.15.0",
            "pytest>=8.2.2",
            "pytest-cov>=6.1.1",
        ],
    },
)
