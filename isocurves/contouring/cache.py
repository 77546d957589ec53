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

"""Binary cache of contour strips.

Layout (all values big endian):
 levelcount: int64
 for each level: stripcount: int64
   for each strip: nodecount: int64, then nodecount int64 indices
 deltax: float64, deltay: float64
 discontinuitycount: int64, then that many int64 indices
"""

import struct

import numpy as N

_int = struct.Struct('>q')
_float = struct.Struct('>d')
_index_dtype = N.dtype('>i8')

class CacheFormatError(Exception):
    """The cache data could not be decoded."""

def encodeCurves(stripLists, deltax, deltay, discontinuities):
    """Return bytes encoding the strips, spacing and discontinuities."""

    out = [_int.pack(len(stripLists))]
    for strips in stripLists:
        out.append(_int.pack(len(strips)))
        for strip in strips:
            out.append(_int.pack(len(strip)))
            out.append(N.asarray(strip, dtype=_index_dtype).tobytes())
    out.append(_float.pack(deltax))
    out.append(_float.pack(deltay))
    discontinuities = sorted(discontinuities)
    out.append(_int.pack(len(discontinuities)))
    out.append(N.asarray(discontinuities, dtype=_index_dtype).tobytes())
    return b''.join(out)

class _Reader:
    """Read values from bytes, checking for truncation."""

    def __init__(self, data):
        self.data = data
        self.pos = 0

    def _take(self, nbytes):
        if nbytes < 0 or self.pos + nbytes > len(self.data):
            raise CacheFormatError('Cache data truncated')
        chunk = self.data[self.pos:self.pos+nbytes]
        self.pos += nbytes
        return chunk

    def count(self):
        val = _int.unpack(self._take(_int.size))[0]
        if val < 0:
            raise CacheFormatError('Negative count in cache')
        return val

    def real(self):
        return _float.unpack(self._take(_float.size))[0]

    def indices(self, num):
        chunk = self._take(num*_index_dtype.itemsize)
        return [int(i) for i in N.frombuffer(chunk, dtype=_index_dtype)]

def decodeCurves(data, numlevels=None, numnodes=None):
    """Decode bytes written by encodeCurves.

    Returns (stripLists, deltax, deltay, discontinuities).
    If numlevels is given, the number of levels must match. If
    numnodes is given, node indices must be below it.
    Raises CacheFormatError on bad data.
    """

    r = _Reader(data)
    nlevels = r.count()
    if numlevels is not None and nlevels != numlevels:
        raise CacheFormatError(
            'Cache has %i levels, expected %i' % (nlevels, numlevels))

    stripLists = []
    for k in range(nlevels):
        strips = []
        for n in range(r.count()):
            strips.append(r.indices(r.count()))
        stripLists.append(strips)

    deltax = r.real()
    deltay = r.real()
    discontinuities = r.indices(r.count())

    if r.pos != len(data):
        raise CacheFormatError('Unexpected data at end of cache')

    if numnodes is not None:
        for strips in stripLists:
            for strip in strips:
                if strip and (min(strip) < 0 or max(strip) >= numnodes):
                    raise CacheFormatError('Node index out of range in cache')

    return stripLists, deltax, deltay, discontinuities
