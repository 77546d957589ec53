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

"""Joining contour segments into strips.

A strip is a list of secondary grid node indices. It is closed if its
first and last nodes are the same.
"""

import math
import logging
from collections import deque

import numpy as N

logger = logging.getLogger(__name__)

def isClosed(strip):
    return len(strip) > 2 and strip[0] == strip[-1]

class IsoCurveSet:
    """Strips for each contour level, with the grid they are made on.

    stripLists[k] is the list of strips for levels[k].
    """

    def __init__(self, levels, geometry, stripLists=None,
                 discontinuities=()):
        self.levels = list(levels)
        self.geometry = geometry
        if stripLists is None:
            stripLists = [[] for l in self.levels]
        self.stripLists = stripLists
        self.discontinuities = sorted(discontinuities)
        # positions of open strips which could not be joined, per level
        self.unpaired = [[] for l in self.levels]
        # strips made by the stitcher, per level
        self.extraStrips = [[] for l in self.levels]
        self.selfHealed = False

    def __len__(self):
        return len(self.stripLists)

    def __getitem__(self, k):
        return self.stripLists[k]

    def __eq__(self, other):
        """Same strips, spacing and discontinuities."""
        if not isinstance(other, IsoCurveSet):
            return NotImplemented
        return ( self.stripLists == other.stripLists and
                 self.deltaX == other.deltaX and
                 self.deltaY == other.deltaY and
                 list(self.discontinuities) == list(other.discontinuities) )

    def __repr__(self):
        return '<IsoCurveSet levels=%i strips=%s>' % (
            len(self.levels), [len(s) for s in self.stripLists])

    @property
    def deltaX(self):
        return self.geometry.deltaX

    @property
    def deltaY(self):
        return self.geometry.deltaY

    def getX(self, index):
        return self.geometry.getX(index)

    def getY(self, index):
        return self.geometry.getY(index)

    isClosed = staticmethod(isClosed)

    def numStrips(self):
        """Total number of strips over all levels."""
        return sum([len(s) for s in self.stripLists])

    def iterStrips(self):
        """Iterate over (levelindex, strip) for all strips."""
        for k, strips in enumerate(self.stripLists):
            for strip in strips:
                yield k, strip

    def stripCoordinates(self, k, n):
        """Return (n, 2) array of x, y for strip n of level k."""
        return self.geometry.coordinates(self.stripLists[k][n])

    def area(self, k, n):
        """Area enclosed by strip n of level k (0 if open)."""
        strip = self.stripLists[k][n]
        if not isClosed(strip):
            return 0.
        xy = self.geometry.coordinates(strip)
        x, y = xy[:,0], xy[:,1]
        return 0.5*abs(float(N.sum(x[:-1]*y[1:] - x[1:]*y[:-1])))

    def edgeWeight(self, k, n):
        """Length of strip n of level k."""
        xy = self.geometry.coordinates(self.stripLists[k][n])
        if len(xy) < 2:
            return 0.
        return float(N.sum(N.hypot(*N.diff(xy, axis=0).T)))

    def touchesBoundary(self):
        """Does any open strip end on the boundary?"""
        onb = self.geometry.isNodeOnBoundary
        for k, strip in self.iterStrips():
            if not isClosed(strip) and (onb(strip[0]) or onb(strip[-1])):
                return True
        return False

    def boundingBox(self):
        """Return (xmin, xmax, ymin, ymax) of all strips.

        Returns None if there are no strips."""

        boxes = []
        for k, strip in self.iterStrips():
            xy = self.geometry.coordinates(strip)
            boxes.append((xy[:,0].min(), xy[:,0].max(),
                          xy[:,1].min(), xy[:,1].max()))
        if not boxes:
            return None
        boxes = N.array(boxes)
        return ( float(boxes[:,0].min()), float(boxes[:,1].max()),
                 float(boxes[:,2].min()), float(boxes[:,3].max()) )

    def dumpLevel(self, k):
        """Log the ends of each strip of a level at debug level."""
        geom = self.geometry
        logger.debug('level %i (%g): %i strips', k, self.levels[k],
                     len(self.stripLists[k]))
        for n, strip in enumerate(self.stripLists[k]):
            logger.debug(
                '  strip %i: %i nodes, %s, (%g, %g) to (%g, %g)%s', n,
                len(strip), 'closed' if isClosed(strip) else 'open',
                geom.getX(strip[0]), geom.getY(strip[0]),
                geom.getX(strip[-1]), geom.getY(strip[-1]),
                ' unpaired' if n in self.unpaired[k] else '')

    def writeText(self, fileobj):
        """Write coordinates of strips as text.

        Each level starts with a "# level" line, strips are tab
        separated x y rows with a blank line after each strip.
        Extra strips from the stitcher follow the normal ones.
        """

        for k, level in enumerate(self.levels):
            fileobj.write('# level %i %s\n' % (k, repr(level)))
            for strip in self.stripLists[k] + self.extraStrips[k]:
                for x, y in self.geometry.coordinates(strip):
                    fileobj.write('%s\t%s\n' % (repr(float(x)),
                                                repr(float(y))))
                fileobj.write('\n')

def mergeStrips(a, b):
    """Join strip b onto strip a if they share an end node.

    a is modified in place. Returns True if joined. Closed strips
    are never joined.
    """

    if not a or not b or isClosed(a) or isClosed(b):
        return False
    if a[-1] == b[0]:
        a.extend(b[1:])
    elif a[-1] == b[-1]:
        a.extend(b[-2::-1])
    elif a[0] == b[-1]:
        a[:0] = b[:-1]
    elif a[0] == b[0]:
        a[:0] = b[:0:-1]
    else:
        return False
    return True

def removeDuplicateNodes(strip):
    """Return strip without consecutive repeated nodes."""
    out = strip[:1]
    for i in strip[1:]:
        if i != out[-1]:
            out.append(i)
    return out

def splitAtBoundary(strip, onboundary):
    """Split an open strip where it touches the boundary.

    Interior nodes on the boundary end one piece and start the next.
    Pieces of fewer than 3 nodes are dropped, unless the strip is not
    split at all.
    """

    cuts = [i for i in range(1, len(strip)-1) if onboundary(strip[i])]
    if not cuts:
        return [strip]
    pieces = []
    start = 0
    for c in cuts + [len(strip)-1]:
        if c - start > 1:
            pieces.append(strip[start:c+1])
        start = c
    return pieces

class StripAccumulator:
    """Build strips from segments, then tidy them up.

    Segments are chained on to the first strip with a matching end;
    otherwise a new strip is started at the front of the list.
    """

    def __init__(self, weldToleranceOverride=False):
        self.weldToleranceOverride = weldToleranceOverride
        self.levels = []
        self.geometry = None
        self.weldMultiplier = 1.
        self.result = None
        self._strips = []

    def beginPass(self, levels, geometry, weldMultiplier):
        self.levels = list(levels)
        self.geometry = geometry
        self.weldMultiplier = weldMultiplier
        self.result = None
        self._strips = [[] for l in levels]

    def onSegment(self, k, i1, i2):
        """Add segment i1-i2 to level k."""
        if i1 == i2:
            return
        strips = self._strips[k]
        for strip in strips:
            if i1 == strip[0]:
                strip.appendleft(i2)
            elif i1 == strip[-1]:
                strip.append(i2)
            elif i2 == strip[0]:
                strip.appendleft(i1)
            elif i2 == strip[-1]:
                strip.append(i1)
            else:
                continue
            return
        strips.insert(0, deque((i1, i2)))

    def endPass(self, discontinuities):
        """Return the strips as an IsoCurveSet."""
        stripLists = [[list(s) for s in strips] for strips in self._strips]
        self._strips = []
        self.result = IsoCurveSet(self.levels, self.geometry, stripLists,
                                  discontinuities)
        return self.result

    def weldDistances(self, hasdiscontinuities):
        """Return squared (closing, joining) weld distances.

        The closing distance is used for the ends of one strip, the
        joining distance for the ends of two different strips.
        """
        g = self.geometry
        mult = self.weldMultiplier
        close2 = mult * max(g.deltaX, g.deltaY)**2
        join2 = mult * (g.deltaX**2 + g.deltaY**2)
        if hasdiscontinuities or self.weldToleranceOverride:
            join2 *= mult
        return close2, join2

    def compact(self, curves=None):
        """Merge and tidy strips in curves (default the last result).

        The IsoCurveSet is modified and returned.
        """

        if curves is None:
            curves = self.result
        if curves is None:
            raise RuntimeError('No contours to compact')

        close2, join2 = self.weldDistances(bool(curves.discontinuities))
        for k in range(len(curves.stripLists)):
            strips, unpaired = self.compactLevel(
                curves.stripLists[k], close2, join2)
            curves.stripLists[k] = strips
            curves.unpaired[k] = unpaired
            if unpaired and not self.weldToleranceOverride:
                logger.warning(
                    'level %g: %i open strips with unpaired ends kept',
                    curves.levels[k], len(unpaired))
        return curves

    def compactLevel(self, strips, close2, join2):
        """Tidy the strips of one level.

        Returns (strips, unpaired) where unpaired lists the positions
        of open strips with an end off the boundary.
        """

        geom = self.geometry
        onb = geom.isNodeOnBoundary
        dist2 = geom.distance2

        # join strips with identical ends until nothing changes
        arena = [list(s) for s in strips if s]
        changed = True
        while changed:
            changed = False
            for i in range(len(arena)):
                if arena[i] is None:
                    continue
                for j in range(i+1, len(arena)):
                    if arena[j] is not None and mergeStrips(arena[i], arena[j]):
                        arena[j] = None
                        changed = True

        arena = [removeDuplicateNodes(s) for s in arena if s is not None]
        arena = [s for s in arena if len(s) > 1]

        def closeIfNear(s, limit2):
            if ( not isClosed(s) and len(s) > 2 and
                 not (onb(s[0]) and onb(s[-1])) and
                 dist2(s[0], s[-1]) < limit2 ):
                s.append(s[0])

        for s in arena:
            closeIfNear(s, close2)

        # force together the nearest pair of loose ends, repeatedly
        while True:
            best = None
            loose = [i for i, s in enumerate(arena) if not isClosed(s)]
            for ii, i in enumerate(loose):
                a = arena[i]
                for j in loose[ii+1:]:
                    b = arena[j]
                    for ea, eb in ((-1, 0), (0, -1), (-1, -1), (0, 0)):
                        na, nb = a[ea], b[eb]
                        if onb(na) or onb(nb):
                            continue
                        d2 = dist2(na, nb)
                        if d2 < join2 and (best is None or d2 < best[0]):
                            best = (d2, i, j, ea, eb)
            if best is None:
                break

            d2, i, j, ea, eb = best
            a, b = arena[i], arena[j]
            if ea == 0:
                a.reverse()
            if eb == -1:
                b = b[::-1]
            a.extend(b[1:] if a[-1] == b[0] else b)
            del arena[j]
            closeIfNear(a, join2)

        out = []
        for s in arena:
            if isClosed(s):
                out.append(s)
            else:
                out += splitAtBoundary(s, onb)

        unpaired = []
        if not self.weldToleranceOverride:
            unpaired = [n for n, s in enumerate(out)
                        if not isClosed(s) and not (onb(s[0]) and onb(s[-1]))]
        return out, unpaired
