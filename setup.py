# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.
import setuptools
import re



def read_file(filename):
    with open(filename) as file:
        return file.read()


version = re.search("__version__ = '([0-9.]*)'",
                    read_file('nimby/__init__.py')).group(1)

setuptools.setup(
    name='nimby',
    version=version,
    author='Ram Rachum',
    author_email='ram@rachum.com',
    description='Nimby - Learning to play the stick game with reinforcement learning',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(exclude=['tests*']),
    install_requires=read_file('requirements.txt'),
    python_requires='>=3.9',
    extras_require={
        'tests': {
            'pytest',
            'pytest-xdist',
        },
    },
    entry_points={
        'console_scripts': [
            'nimby = nimby.commanding:nimby'
        ],
    },
    classifiers=[
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: Implementation :: CPython',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Topic :: Games/Entertainment :: Board Games',
    ],
)
