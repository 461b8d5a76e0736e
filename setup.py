# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os

from setuptools import setup

from cqlcodec import __version__

long_description = ""
if os.path.exists("README.rst"):
    with open("README.rst") as f:
        long_description = f.read()


def run_setup():

    dependencies = []

    test_dependencies = ['pytest', 'mock', 'pytz']

    setup(
        name='cql-value-codec',
        version=__version__,
        description='Value codec for the CQL native protocol',
        long_description=long_description,
        packages=['cqlcodec'],
        keywords='cassandra,scylla,cql,codec',
        include_package_data=True,
        python_requires='>=3.8',
        install_requires=dependencies,
        tests_require=test_dependencies,
        extras_require={'test': test_dependencies},
        classifiers=[
            'Development Status :: 4 - Beta',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: Apache Software License',
            'Natural Language :: English',
            'Operating System :: OS Independent',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Programming Language :: Python :: Implementation :: CPython',
            'Programming Language :: Python :: Implementation :: PyPy',
            'Topic :: Software Development :: Libraries :: Python Modules'
        ])

run_setup()
