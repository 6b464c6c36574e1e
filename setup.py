# -*- coding: utf-8 -*-
from setuptools import setup

from lorgnette import VERSION

setup(name="lorgnette",
      version=VERSION,
      description="Deferreds, promises and callback aggregation, with a blocking look-alike syntax",
      packages=['lorgnette',
                'lorgnette.twisted_stack'],
      python_requires='>=3.8',
      install_requires=[],
      extras_require={
          'twisted': ['Twisted'],
          'test': ['pytest', 'Twisted'],
      },
      license='MIT'
      )
