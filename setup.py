# -*- coding: utf-8 -*-
from setuptools import setup

from lorgnette import VERSION

install_requires = []

setup(name="lorgnette",
      version=VERSION,
      description="Deferred results with chaining, combinators and pluggable event loops",
      author="Greg Hazel and Steven Hazel",
      author_email="sah@awesame.org",
      maintainer="Steven Hazel",
      maintainer_email="sah@awesame.org",
      packages=['lorgnette',
                'lorgnette.stack',
                'lorgnette.asyncio_stack',
                'lorgnette.twisted_stack',
                'lorgnette.tornado_stack'],
      install_requires=install_requires,
      extras_require={
          'twisted': ['Twisted'],
          'tornado': ['tornado'],
          'test': ['pytest', 'Twisted', 'tornado'],
      },
      python_requires='>=3.8',
      license='MIT'
      )
