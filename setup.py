# setup.py
from setuptools import setup, find_packages

setup(
    name='panelkit',
    version='0.1.0',
    description='Declarative markup, CSS-subset styling and a module registry for retained-mode panel toolkits.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # Finds `panelkit` and `panelkit_cli`
    packages=find_packages(include=['panelkit', 'panelkit.*', 'panelkit_cli', 'panelkit_cli.*']),

    # These are the dependencies the runtime needs.
    install_requires=[
        'PySide6',
        'typer',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # Creates an executable script named `panelkit` that calls the `app`
    # object inside `panelkit_cli.main`.
    entry_points={
        'console_scripts': [
            'panelkit = panelkit_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
