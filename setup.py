# coding: utf-8
# (c) Copyright IBM Corp. 2025

import re
from os import path

from setuptools import find_namespace_packages, setup

pwd = path.abspath(path.dirname(__file__))

# Read VERSION without importing the package and its dependencies
with open(path.join(pwd, "src", "tracewire", "version.py"), encoding="utf-8") as f:
    VERSION = re.search(r"VERSION = \"([^\"]+)\"", f.read()).group(1)

# Import README.md into long_description
with open(path.join(pwd, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()


setup(name='tracewire',
      version=VERSION,
      license='MIT',
      description='W3C trace context and baggage propagation with thread-safe metric aggregators',
      package_dir={'': 'src'},
      packages=find_namespace_packages(where='src', include=['tracewire', 'tracewire.*']),
      long_description=long_description,
      long_description_content_type='text/markdown',
      zip_safe=False,
      python_requires='>=3.8',
      install_requires=['opentelemetry-api>=1.27.0',
                        'PyYAML>=6.0.1',],
      extras_require={
          'test': ['pytest>=7.0',
                   'mock>=4.0',],
      },
      keywords=['tracing', 'distributed-tracing', 'w3c', 'traceparent',
                'tracestate', 'baggage', 'metrics'],
      classifiers=[
          'Development Status :: 5 - Production/Stable',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: MIT License',
          'Operating System :: OS Independent',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Topic :: System :: Monitoring',
          'Topic :: System :: Networking :: Monitoring',
          'Topic :: Software Development :: Libraries :: Python Modules'])
