# -*- coding: UTF-8 -*-

import re
import os
from setuptools import setup, find_packages

cur_path = os.path.dirname(os.path.realpath(__file__))
with open(cur_path + '/twtRestCurl/__init__.py') as fin:
    read_init = fin.read()

__version__ = re.search(r"__version__\s*=\s*'(.*)'", read_init, re.M).group(1)
__author__ = re.search(r"__author__\s*=\s*'(.*)'", read_init, re.M).group(1)

readme_content = ""
with open(cur_path + "/README.rst") as f:
    for line in range(0, 4):  # just a few lines coz pypi does not fully  support ResT
        readme_content += f.readline()

assert __version__ is not None and __author__ is not None
setup(
    packages=find_packages(),

    name="twtRestCurl",
    version=__version__,
    author=__author__,
    author_email="nickmilon/gmail/com",
    maintainer="@nickmilon",
    url="https://github.com/nickmilon/twtRestCurl",
    description="A pycurl interface to Twitter's REST API with basic authentication",
    long_description=readme_content,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries"
        ],
    license="GPL3",
    keywords=["Twitter", "API", "REST", "HTTP", "python"],
    zip_safe=False,
    python_requires=">=3.6",
    test_suite="twtRestCurl.tests",
    extras_require={
        'test': ['pytest', 'nose'],
    },
    install_requires=[
        'simplejson',
        'pycurl'
    ],
)
