#!/usr/bin/env python
import setuptools


def dict_of(cls):
    """Decorator that converts a class into a dict of its public members."""
    return {k: v for k, v in cls.__dict__.items() if not k.startswith('_')}


@dict_of
class setup_params:
    name = 'depsolve'
    version = '0.1'

    description = 'Version resolution engine for a language package manager'

    author = 'Eldar Abusalimov'
    author_email = 'eldar.abusalimov@gmail.com'

    license = 'MIT'

    classifiers = [
        'Private :: Do Not Upload',

        'Development Status :: 3 - Alpha',

        'Intended Audience :: Developers',
        'Topic :: Software Development :: Build Tools',
        'Topic :: System :: Software Distribution',

        'License :: OSI Approved :: MIT License',

        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ]
    keywords = 'depsolve package manager dependency resolution semver'

    packages = setuptools.find_packages(include=['depsolve', 'depsolve.*'])

    python_requires = '>=3.6'

    install_requires = [
        'ply>=3.4',
        'semantic_version>=2.8',
    ]

    @dict_of
    class extras_require:
        test = [
            'pytest',
        ]

        dev = test + [
            'pytest-cov',
        ]

    tests_require = extras_require['test']


if __name__ == '__main__':
    # Guarded to make the module importable by tools like pytest.
    setuptools.setup(**setup_params)
