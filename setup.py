#!/usr/bin/env python
from setuptools import setup
setup(
    name='graphobjects',
    version='0.1.0',
    description='typed nodes and connections for the Facebook Graph API',
    author='Six Apart Ltd.',
    author_email='python@sixapart.com',

    packages=['graphobjects'],
    python_requires='>=3.7',
    install_requires=['simplejson>=3.3.0', 'httplib2>=0.10.3'],
    extras_require={
        'test': ['mock', 'pytest'],
    },
)
