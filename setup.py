#!/usr/bin/env python3

#    Copyright (C) 2008 Jeremy S. Sanders
#    Email: Jeremy Sanders <jeremy@jeremysanders.net>
#
#    This program is free software; you can redistribute it and/or modify
#    it under the terms of the GNU General Public License as published by
#    the Free Software Foundation; either version 2 of the License, or
#    (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU General Public License for more details.
#
#    You should have received a copy of the GNU General Public License along
#    with this program; if not, write to the Free Software Foundation, Inc.,
#    51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.
##############################################################################

"""
isocurves setuptools script
install with "pip install ." (add "[test]" for the test dependencies)
"""

import os.path

from setuptools import setup

def readVersion():
    """Return the version from the VERSION file in the package."""
    filename = os.path.join(
        os.path.dirname(os.path.abspath(__file__)), 'isocurves', 'VERSION')
    with open(filename) as f:
        return f.readline().strip()

setup(
    name='isocurves',
    version=readVersion(),
    description='Adaptive two resolution iso-contouring of 2D fields',
    author='Jeremy Sanders',
    author_email='jeremy@jeremysanders.net',
    license='GPL-2.0-or-later',
    python_requires='>=3.8',
    packages=[
        'isocurves',
        'isocurves.utils',
        'isocurves.setting',
        'isocurves.contouring',
    ],
    package_data={'isocurves': ['VERSION']},
    install_requires=['numpy'],
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': [
            'isocurves=isocurves.isocurves_main:run',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: GNU General Public License v2 or later '
        '(GPLv2+)',
        'Topic :: Scientific/Engineering :: Mathematics',
    ],
)
