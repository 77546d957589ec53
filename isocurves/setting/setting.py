#    Copyright (C) 2005 Jeremy S. Sanders
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

"""Typed values for the contouring options.

Each setting checks values assigned to it and converts to and from the
text used in settings files, e.g.

s = Int('primaryColumns', 64, minval=2)
s.val = 32
s.val = s.fromText('16')
"""

import re

import numpy as N

from .. import utils

_splitre = re.compile(r'[\t\n, ]+')

def _textToFloat(text):
    try:
        return float(text.strip())
    except ValueError:
        raise utils.InvalidType('Not a number: %s' % text)

def _textToFloats(text):
    return [_textToFloat(x) for x in _splitre.split(text.strip()) if x]

def _isSequence(val):
    return isinstance(val, (list, tuple, N.ndarray))

class Setting(object):
    """A named value of a particular type, with a default."""

    typename = 'setting'

    def __init__(self, name, value, descr=''):
        self.name = name
        self.descr = descr
        self.parent = None
        self._val = self.normalize(value)
        self.default = self._val

    def _copyArgs(self):
        """Extra keyword arguments needed to construct a copy."""
        return {}

    def copy(self):
        """Return an independent setting with the same value."""
        obj = self.__class__(
            self.name, self.default, descr=self.descr, **self._copyArgs())
        obj._val = self._val
        return obj

    def get(self):
        return self._val

    def set(self, v):
        self._val = self.normalize(v)

    val = property(get, set, None, 'Get or modify the value of the setting')

    def isDefault(self):
        return self._val == self.default

    def reset(self):
        """Go back to the default value."""
        self._val = self.default

    def normalize(self, val):
        """Check and convert an assigned value to the stored form.

        Raises utils.InvalidType if this is not possible."""
        return val

    def toText(self):
        return str(self._val)

    def fromText(self, text):
        """Convert text to a value, raising utils.InvalidType if bad."""
        return self.normalize(text)

class Str(Setting):
    typename = 'str'

    def normalize(self, val):
        if not isinstance(val, str):
            raise utils.InvalidType('Text value needed for %s' % self.name)
        return val

_truetext = ('true', '1', 't', 'y', 'yes', 'on')
_falsetext = ('false', '0', 'f', 'n', 'no', 'off')

class Bool(Setting):
    typename = 'bool'

    def normalize(self, val):
        # numpy bools come from comparisons on arrays
        if isinstance(val, (bool, N.bool_)) or type(val) is int:
            return bool(val)
        raise utils.InvalidType('True or False needed for %s' % self.name)

    def fromText(self, text):
        t = text.strip().lower()
        if t in _truetext:
            return True
        if t in _falsetext:
            return False
        raise utils.InvalidType('Not a boolean: %s' % text)

class _Ranged(Setting):
    """Base for numbers which must lie between minval and maxval."""

    def __init__(self, name, value, minval=None, maxval=None, **args):
        self.minval = self.defminval if minval is None else minval
        self.maxval = self.defmaxval if maxval is None else maxval
        Setting.__init__(self, name, value, **args)

    def _copyArgs(self):
        return {'minval': self.minval, 'maxval': self.maxval}

    def checkRange(self, v):
        if v < self.minval or v > self.maxval:
            raise utils.InvalidType(
                '%s must be in range %s to %s' % (
                    self.name, self.minval, self.maxval))
        return v

class Int(_Ranged):
    typename = 'int'
    defminval = -1000000
    defmaxval = 1000000

    def normalize(self, val):
        if isinstance(val, bool) or not isinstance(val, (int, N.integer)):
            raise utils.InvalidType('Integer needed for %s' % self.name)
        return self.checkRange(int(val))

    def fromText(self, text):
        try:
            v = int(text.strip())
        except ValueError:
            raise utils.InvalidType('Not an integer: %s' % text)
        return self.normalize(v)

class Float(_Ranged):
    typename = 'float'
    defminval = -1e200
    defmaxval = 1e200

    def normalize(self, val):
        if not utils.isFiniteNumber(val):
            raise utils.InvalidType(
                'Finite number needed for %s' % self.name)
        return self.checkRange(float(val))

    def toText(self):
        return repr(self._val)

    def fromText(self, text):
        return self.normalize(_textToFloat(text))

class FloatOrAuto(Float):
    """A float, or Auto to have the value worked out."""

    typename = 'float-or-auto'

    def normalize(self, val):
        if isinstance(val, str) and val.strip().lower() == 'auto':
            return 'Auto'
        return Float.normalize(self, val)

    def toText(self):
        return 'Auto' if self._val == 'Auto' else repr(self._val)

    def fromText(self, text):
        return self.normalize(
            text if text.strip().lower() == 'auto' else _textToFloat(text))

class Choice(Setting):
    """One out of a list of strings."""

    typename = 'choice'

    def __init__(self, name, vallist, val, **args):
        self.vallist = tuple(vallist)
        Setting.__init__(self, name, val, **args)

    def copy(self):
        obj = Choice(self.name, self.vallist, self.default, descr=self.descr)
        obj._val = self._val
        return obj

    def normalize(self, val):
        if val not in self.vallist:
            raise utils.InvalidType(
                '%s must be one of %s' % (self.name, ', '.join(self.vallist)))
        return val

    def fromText(self, text):
        return self.normalize(text.strip())

class FloatList(Setting):
    """A list of finite floats, written as "a, b, c"."""

    typename = 'float-list'

    def normalize(self, val):
        if not _isSequence(val):
            raise utils.InvalidType('List of numbers needed for %s' % self.name)
        if not all(utils.isFiniteNumber(x) for x in val):
            raise utils.InvalidType('Finite numbers only allowed')
        return [float(x) for x in val]

    def toText(self):
        return ', '.join([repr(x) for x in self._val])

    def fromText(self, text):
        return self.normalize(_textToFloats(text))

class Limits(FloatList):
    """Rectangle (xmin, xmax, ymin, ymax) with minima below maxima."""

    typename = 'limits'

    def normalize(self, val):
        if not _isSequence(val) or len(val) != 4:
            raise utils.InvalidType('Four values needed for limits')
        try:
            return utils.checkLimits(val)
        except utils.ConfigurationError as e:
            raise utils.InvalidType(str(e))
