# utilfuncs.py
# utility functions

#    Copyright (C) 2003 Jeremy S. Sanders
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
###############################################################################

import os
import os.path
import sys
import logging
import random

import numpy as N

class InvalidType(Exception):
    """Exception used when invalid values are used in settings."""

class ConfigurationError(ValueError):
    """Raised when the contouring engine is given a bad configuration."""

_logformat = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'

def setupLogging(level=logging.WARNING, stream=None):
    """Send log messages from the package to stream (stderr by default).

    Calling this more than once replaces the previous handler."""

    root = logging.getLogger('isocurves')
    for h in list(root.handlers):
        if getattr(h, '_isocurves', False):
            root.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None
                                    else sys.stderr)
    handler.setFormatter(logging.Formatter(_logformat))
    handler._isocurves = True
    root.addHandler(handler)
    root.setLevel(level)
    return handler

def isFiniteNumber(v):
    """Is v an int or float which is finite?"""
    return ( isinstance(v, (int, float, N.integer, N.floating)) and
             not isinstance(v, bool) and N.isfinite(v) )

def checkLimits(limits):
    """Return limits as a tuple of 4 floats (xmin, xmax, ymin, ymax).

    Raises ConfigurationError if they are not finite and increasing
    on both axes."""

    try:
        xmin, xmax, ymin, ymax = [float(v) for v in limits]
    except (TypeError, ValueError):
        raise ConfigurationError(
            'Limits should be four numbers (xmin, xmax, ymin, ymax)')

    if not N.all(N.isfinite([xmin, xmax, ymin, ymax])):
        raise ConfigurationError('Limits must be finite')
    if not (xmin < xmax and ymin < ymax):
        raise ConfigurationError(
            'Limits must have minimum < maximum on both axes')
    return (xmin, xmax, ymin, ymax)

def atomicWrite(filename, data):
    """Write bytes to filename so that readers never see a partial file.

    The data are written to a temporary file in the same directory,
    which is then renamed over the destination."""

    tmpfilename = "%s.tmp.%i" % (
        os.path.abspath(filename), random.randint(0,1000000))
    try:
        with open(tmpfilename, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmpfilename, filename)
    finally:
        if os.path.exists(tmpfilename):
            os.unlink(tmpfilename)
