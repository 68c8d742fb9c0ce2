#!/usr/bin/env python3

from os import path

from setuptools import setup

from git_sweep import __version__

this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, 'README.md'), mode="r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name='git-sweep',
    version=__version__,
    description='Interactively review stale local git branches, oldest first, and keep or delete each one',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    keywords='git branch cleanup',
    packages=['git_sweep'],
    entry_points={
        'console_scripts': [
            'git-sweep = git_sweep.cli:main'
        ]
    },
    python_requires='>=3.6, <4',
    extras_require={
        'test': [
            'pytest',
            'pytest-mock',
        ]
    },
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Development Status :: 5 - Production/Stable',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX'
    ],
    # This is a pure-Python but NOT universal wheel:
    # https://realpython.com/python-wheels/#different-types-of-wheels
    options={'bdist_wheel': {'universal': False}}
)
