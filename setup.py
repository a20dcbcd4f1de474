# setup.py

from setuptools import setup, find_packages

setup(
    name="hypervisor-stats",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'hypervisor-stats=hypervisor_stats.cli:main',
        ],
    },
    author="Your Name",
    author_email="your.email@example.com",
    description="KVM hypervisor guest utilization report from Chef node data",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    keywords="chef ohai kvm virtualization capacity",
    python_requires=">=3.7",
)
