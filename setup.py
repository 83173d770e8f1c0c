#!/usr/bin/env python

from setuptools import setup

setup(name='mudcolumn',
      version='0.1.0',
      description='One-dimensional vertical model of tidal flow, fluid mud and turbulence',
      packages=['mudcolumn'],
      python_requires='>=3.8',
      install_requires=[
          'numpy',
          'scipy',
          'traitlets',
          'h5py',
          'pytz',
      ],
      extras_require={
          'test': ['pytest'],
      },
      )
