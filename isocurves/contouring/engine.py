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

"""Adaptive two resolution contouring of a field (Aramini's method).

The primary grid splits the domain into blocks. Each block is
recursively split into four while its centre value is above (or
below) more than two of its corners, down to cells of the secondary
grid. Crossings of each level with the edges of the resulting cells
are interpolated, following chains of smaller neighbouring cells where
they exist, and rounded to the nearest secondary grid node.

Segments are passed to a sink object with the methods

 beginPass(levels, geometry, weldMultiplier)
 onSegment(levelindex, index1, index2)
 endPass(discontinuities) -> result of generate()
"""

import math
import logging

from .. import utils
from .grid import (
    makeEngineConfig, weldMultiplier, GridGeometry, ColumnWindow)

logger = logging.getLogger(__name__)

def sentinelBelow(levels):
    """Value used for NaN or -inf, below all levels."""
    lo = min(levels)
    val = lo*10 if lo < 0 else -10*lo
    if not val < lo:
        val = lo - 10.
    return val

def sentinelAbove(levels):
    """Value used for +inf, above all levels."""
    hi = max(levels)
    val = hi*10
    if not val > hi:
        val = hi + 10.
    return val

class ContourEngine:
    """Generate contour segments of a field for a set of levels."""

    def __init__(self, sink=None):
        if sink is None:
            from .strips import StripAccumulator
            sink = StripAccumulator()
        self.sink = sink
        self.config = None
        self.fieldfn = None
        self.levels = []
        self.geometry = None
        self.discontinuities = set()
        self.substituted = set()
        self.selfHealed = False
        self.window = None

    def configure(self, levels, limits, primaryGrid, secondaryGrid,
                  fieldfn, numLevels=None, **args):
        """Set parameters for contouring.

        levels: sequence of contour values
        limits: (xmin, xmax, ymin, ymax)
        primaryGrid, secondaryGrid: (columns, rows) of the two grids
        fieldfn: function f(x, y) returning a float
        numLevels: if given, must equal the number of levels

        Raises utils.ConfigurationError if the parameters are invalid.
        """

        if not callable(fieldfn):
            raise utils.ConfigurationError('Field must be callable')
        self.setConfig(
            makeEngineConfig(levels, limits, primaryGrid, secondaryGrid,
                             numLevels=numLevels, **args),
            fieldfn)

    def setConfig(self, config, fieldfn):
        """Use an already checked EngineConfig."""
        self.config = config
        self.fieldfn = fieldfn
        self.levels = list(config.levels)
        self.geometry = GridGeometry(
            config.limits, config.secondaryColumns, config.secondaryRows)
        self.discontinuities = set()
        self.substituted = set()
        self.selfHealed = False
        self.window = None

    @property
    def weldMultiplier(self):
        return weldMultiplier(self.config)

    def _xedge(self, i):
        c = self.config
        return i*c.secondaryColumns // c.primaryColumns

    def _yedge(self, j):
        c = self.config
        return j*c.secondaryRows // c.primaryRows

    def generate(self, retriesRemaining=1):
        """Contour the field, returning the result from the sink.

        If the field has NaN or infinite values, and retriesRemaining
        is above zero, a level is added below and above the existing
        levels and contouring is repeated, so the bad region is
        surrounded by contours.
        """

        if self.config is None:
            raise utils.ConfigurationError('Engine has not been configured')

        # levels added by an earlier self-heal are not kept
        self.levels = list(self.config.levels)
        self.selfHealed = False
        return self._generatePass(retriesRemaining)

    def _generatePass(self, retriesRemaining):
        c = self.config
        self.discontinuities = set()
        self.substituted = set()
        self._below = sentinelBelow(self.levels)
        self._above = sentinelAbove(self.levels)

        size = 2*(-(-c.secondaryColumns // c.primaryColumns)) + 2
        self.window = ColumnWindow(size, c.secondaryRows+1)

        self.sink.beginPass(list(self.levels), self.geometry,
                            self.weldMultiplier)
        self._sweep()
        self.window = None

        if self.discontinuities and retriesRemaining > 0:
            below = sentinelBelow(self.levels)
            above = sentinelAbove(self.levels)
            logger.info(
                'field has %i discontinuities: adding levels %g and %g and '
                'contouring again', len(self.discontinuities), below, above)
            self.levels.insert(0, below)
            self.levels.append(above)
            self.selfHealed = True
            return self._generatePass(retriesRemaining-1)

        return self.sink.endPass(set(self.discontinuities))

    def _sweep(self):
        """Subdivide and resolve blocks, one primary column at a time.

        The blocks of column i are subdivided before the blocks of
        column i-1 are resolved, as resolving needs the gaps left on
        their shared edge.
        """

        c = self.config
        yedges = [self._yedge(j) for j in range(c.primaryRows+1)]
        rowspans = list(zip(yedges[:-1], yedges[1:]))
        window = self.window

        window.claim(self._xedge(0), self._xedge(1))
        for y1, y2 in rowspans:
            self._subdivide(self._xedge(0), self._xedge(1), y1, y2)

        for i in range(1, c.primaryColumns):
            xa, xb, xc = self._xedge(i-1), self._xedge(i), self._xedge(i+1)
            window.claim(xb+1, xc)
            for y1, y2 in rowspans:
                self._subdivide(xb, xc, y1, y2)
            for y1, y2 in rowspans:
                self._resolve(xa, xb, y1, y2)

        xa, xb = self._xedge(c.primaryColumns-1), self._xedge(c.primaryColumns)
        for y1, y2 in rowspans:
            self._resolve(xa, xb, y1, y2)

    def _substitute(self, val, x, y):
        """Replace a non finite value by a sentinel."""
        self.discontinuities.add(self.geometry.getIndex(x, y))
        if val > 0:
            return self._above
        return self._below

    def field(self, x, y):
        """Return the field at grid node (x, y), evaluating if needed."""
        w = self.window
        s = w.slot(x)
        if w.top[s, y] != -1:
            return float(w.value[s, y])

        w.top[s, y] = w.left[s, y] = w.right[s, y] = w.bottom[s, y] = 0
        xmin, xmax, ymin, ymax = self.config.limits
        val = float(self.fieldfn(xmin + x*self.geometry.deltaX,
                                 ymin + y*self.geometry.deltaY))
        if not math.isfinite(val):
            val = self._substitute(val, x, y)
            self.substituted.add(self.geometry.getIndex(x, y))
        w.value[s, y] = val
        return val

    def _blocks(self, x1, x2, y1, y2):
        """Yield the indivisible cells of a block with their corners.

        Yields (x1, x2, y1, y2, f11, f12, f21, f22). The block is split
        using a stack rather than recursion.
        """

        field = self.field
        stack = [(x1, x2, y1, y2)]
        while stack:
            x1, x2, y1, y2 = stack.pop()
            if x1 == x2 or y1 == y2:
                continue

            f11 = field(x1, y1)
            f12 = field(x1, y2)
            f21 = field(x2, y1)
            f22 = field(x2, y2)

            if x1 < x2-1 or y1 < y2-1:
                x3 = (x1+x2) // 2
                y3 = (y1+y2) // 2
                f33 = field(x3, y3)
                above = (f33 < f11) + (f33 < f12) + (f33 < f21) + (f33 < f22)
                below = (f33 > f11) + (f33 > f12) + (f33 > f21) + (f33 > f22)
                if above > 2 or below > 2:
                    # pushed in reverse so they come off in order
                    stack.append((x3, x2, y3, y2))
                    stack.append((x1, x3, y3, y2))
                    stack.append((x3, x2, y1, y3))
                    stack.append((x1, x3, y1, y3))
                    continue

            yield x1, x2, y1, y2, f11, f12, f21, f22

    def _subdivide(self, x1, x2, y1, y2):
        """First pass: record the size of each cell at its corners."""
        w = self.window
        for x1, x2, y1, y2, f11, f12, f21, f22 in self._blocks(x1, x2, y1, y2):
            s1 = w.slot(x1)
            s2 = w.slot(x2)
            w.bottom[s1, y2] = x2 - x1
            w.top[s1, y1] = x2 - x1
            w.left[s2, y1] = y2 - y1
            w.right[s1, y1] = y2 - y1

    def _isSubstituted(self, x, y):
        # only grid nodes; saddle samples also add to discontinuities
        return self.geometry.getIndex(x, y) in self.substituted

    def _crossing(self, p1, p2, f1, f2, v, bad1, bad2):
        """Grid position of the crossing of v between positions p1 and p2.

        A crossing next to a substituted value is put on the finite
        node, as the field between them is unknown.
        """
        if bad1 and not bad2:
            return float(p2)
        if bad2 and not bad1:
            return float(p1)
        return p1 + (p2-p1)*(v-f1)/(f2-f1)

    def _walkColumn(self, x, y1, y2, f1, v, gaps):
        """Find crossing of level v up column x from y1 to y2.

        Steps along the chain of gaps left by smaller neighbouring
        cells until the side of v changes. Returns the fractional
        position along the edge, or None if the chain is broken.
        """
        s = self.window.slot(x)
        old, fold = y1, f1
        while True:
            step = int(gaps[s, old])
            new = old + step
            if step <= 0 or new > y2:
                return None
            fnew = self.field(x, new)
            if (fnew > v) != (fold > v):
                break
            old, fold = new, fnew
        pos = self._crossing(old, new, fold, fnew, v,
                             self._isSubstituted(x, old),
                             self._isSubstituted(x, new))
        return (pos-y1) / (y2-y1)

    def _walkRow(self, y, x1, x2, f1, v, gaps):
        """Find crossing of level v along row y from x1 to x2."""
        w = self.window
        old, fold = x1, f1
        while True:
            step = int(gaps[w.slot(old), y])
            new = old + step
            if step <= 0 or new > x2:
                return None
            fnew = self.field(new, y)
            if (fnew > v) != (fold > v):
                break
            old, fold = new, fnew
        pos = self._crossing(old, new, fold, fnew, v,
                             self._isSubstituted(old, y),
                             self._isSubstituted(new, y))
        return (pos-x1) / (x2-x1)

    def _columnFraction(self, x, y1, y2, f1, f2, v):
        """Crossing of v along the whole edge of column x."""
        pos = self._crossing(y1, y2, f1, f2, v, self._isSubstituted(x, y1),
                             self._isSubstituted(x, y2))
        return (pos-y1) / (y2-y1)

    def _rowFraction(self, y, x1, x2, f1, f2, v):
        """Crossing of v along the whole edge of row y."""
        pos = self._crossing(x1, x2, f1, f2, v, self._isSubstituted(x1, y),
                             self._isSubstituted(x2, y))
        return (pos-x1) / (x2-x1)

    def _resolve(self, x1, x2, y1, y2):
        """Second pass: find crossings of each level in each cell."""
        for cell in self._blocks(x1, x2, y1, y2):
            self._resolveCell(*cell)

    def _resolveCell(self, x1, x2, y1, y2, f11, f12, f21, f22):
        """Emit the segments of every level crossing a cell."""

        w = self.window
        s1 = w.slot(x1)
        s2 = w.slot(x2)
        emit = self._emit

        for k, v in enumerate(self.levels):
            a11 = f11 > v
            a12 = f12 > v
            a21 = f21 > v
            a22 = f22 > v
            case = a21 | (a11 << 1) | (a22 << 2) | (a12 << 3)
            if case == 0 or case == 15:
                continue

            left = right = bot = top = None
            xx0 = yy0 = xx1 = yy1 = 0.

            if a11 != a12:
                # left edge
                yy0 = None
                g = w.left[s1, y1]
                if g != 0 and g < w.right[s1, y1]:
                    yy0 = self._walkColumn(x1, y1, y2, f11, v, w.left)
                if yy0 is None:
                    yy0 = self._columnFraction(x1, y1, y2, f11, f12, v)
                left = int(y1 + (y2-y1)*yy0 + 0.5)

            if a21 != a22:
                # right edge
                yy1 = None
                g = w.right[s2, y1]
                if g != 0 and g < w.left[s2, y1]:
                    yy1 = self._walkColumn(x2, y1, y2, f21, v, w.right)
                if yy1 is None:
                    yy1 = self._columnFraction(x2, y1, y2, f21, f22, v)
                right = int(y1 + (y2-y1)*yy1 + 0.5)

            if a11 != a21:
                # bottom edge
                xx0 = None
                g = w.bottom[s1, y1]
                if g != 0 and g < w.top[s1, y1]:
                    xx0 = self._walkRow(y1, x1, x2, f11, v, w.bottom)
                if xx0 is None:
                    xx0 = self._rowFraction(y1, x1, x2, f11, f21, v)
                bot = int(x1 + (x2-x1)*xx0 + 0.5)

            if a12 != a22:
                # top edge
                xx1 = None
                g = w.top[s1, y2]
                if g != 0 and g < w.bottom[s1, y2]:
                    xx1 = self._walkRow(y2, x1, x2, f12, v, w.top)
                if xx1 is None:
                    xx1 = self._rowFraction(y2, x1, x2, f12, f22, v)
                top = int(x1 + (x2-x1)*xx1 + 0.5)

            if not all([math.isfinite(t) for t in (xx0, yy0, xx1, yy1)]):
                continue

            if case in (7, 8):
                emit(k, x1, left, top, y2)
            elif case in (5, 10):
                emit(k, bot, y1, top, y2)
            elif case in (2, 13):
                emit(k, x1, left, bot, y1)
            elif case in (4, 11):
                emit(k, top, y2, x2, right)
            elif case in (3, 12):
                emit(k, x1, left, x2, right)
            elif case in (1, 14):
                emit(k, bot, y1, x2, right)
            else:
                # saddle: sample where the two crossing lines meet
                f = self._saddleValue(x1, x2, y1, y2, xx0, yy0, xx1, yy1)
                if f == v:
                    emit(k, bot, y1, top, y2)
                    emit(k, x1, left, x2, right)
                elif (f > v and f22 > v) or (f < v and f22 < v):
                    emit(k, x1, left, top, y2)
                    emit(k, bot, y1, x2, right)
                else:
                    emit(k, x1, left, bot, y1)
                    emit(k, top, y2, x2, right)

    def _saddleValue(self, x1, x2, y1, y2, xx0, yy0, xx1, yy1):
        """Evaluate the field inside a saddle cell.

        The point is where the line joining the bottom and top crossings
        meets the line joining the left and right crossings. A non
        finite value is replaced by a sentinel as for grid nodes.
        """

        denom = 1 - (xx1-xx0)*(yy1-yy0)
        if denom == 0:
            yy3 = 0.5
        else:
            yy3 = (xx0*(yy1-yy0) + yy0) / denom
        xx3 = yy3*(xx1-xx0) + xx0

        xmin, xmax, ymin, ymax = self.config.limits
        gx = x1 + (x2-x1)*xx3
        gy = y1 + (y2-y1)*yy3
        val = float(self.fieldfn(xmin + gx*self.geometry.deltaX,
                                 ymin + gy*self.geometry.deltaY))
        if not math.isfinite(val):
            ix = min(max(int(gx + 0.5), x1), x2)
            iy = min(max(int(gy + 0.5), y1), y2)
            val = self._substitute(val, ix, iy)
        return val

    def _emit(self, k, gx1, gy1, gx2, gy2):
        geom = self.geometry
        self.sink.onSegment(k, geom.getIndex(gx1, gy1), geom.getIndex(gx2, gy2))
