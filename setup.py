"""Setup script for cpm_1d package."""

from setuptools import setup, find_packages

setup(
    name='cpm_1d',
    version='1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'cpm_1d.config': ['defaults.yaml'],
        'cpm_1d.materials': ['library.yaml'],
    },
    python_requires='>=3.10',
    install_requires=[
        'numpy>=1.20.0',
        'scipy>=1.9.0',
        'matplotlib>=3.3.0',
        'pyyaml>=5.4',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'cpm1d=cpm_1d.transport.api:main',
        ],
    },
)
