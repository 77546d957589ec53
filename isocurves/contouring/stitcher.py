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

"""Sets of contours: repeated generation, caching and stitching.

ContourSet runs the engine and strip accumulator, keeps a binary cache
of the result and finds where strips of a level meet each other or the
boundary. From these meeting points it can make extra closed strips
around regions the engine cannot close by itself, such as regions
bordering a discontinuity of the field.
"""

import math
import logging
from collections import namedtuple

from .. import utils
from .grid import MAX_SECONDARY, GridGeometry, weldMultiplier
from .engine import ContourEngine, sentinelBelow, sentinelAbove
from .strips import StripAccumulator, IsoCurveSet, isClosed
from .graph import BoundaryGraph
from . import cache

logger = logging.getLogger(__name__)

IntersectionRecord = namedtuple('IntersectionRecord', ('index', 'jIndex'))

def spiralOffsets(tolerance):
    """Yield (dx, dy) grid offsets spiralling out from (0, 0).

    tolerance*tolerance*4 offsets are returned. The walk is not
    symmetric about the start: with tolerance 1 only (0, 0), (1, 0),
    (1, 1) and (0, 1) are visited, so neighbours towards -x or -y are
    not found. Larger tolerances go round complete square rings first,
    then part of the next.
    """
    x = y = 0
    layer = 1
    leg = 0
    for it in range(tolerance*tolerance*4):
        yield x, y
        if leg == 0:
            x += 1
            if x == layer:
                leg = 1
        elif leg == 1:
            y += 1
            if y == layer:
                leg = 2
        elif leg == 2:
            x -= 1
            if -x == layer:
                leg = 3
        else:
            y -= 1
            if -y == layer:
                leg = 0
                layer += 1

def _unique(records):
    seen = set()
    out = []
    for r in records:
        if r not in seen:
            seen.add(r)
            out.append(r)
    return out

def _findPos(strip, node, start=0):
    """Position of node in strip at or after start, or None."""
    try:
        return strip.index(node, start)
    except ValueError:
        return None

class ContourSet:
    """Contours of a field for an EngineConfig.

    cachefile: optional path of a binary cache of the strips
    maxpasses: number of passes allowed when not extrapolating to the
     boundary rectangle
    """

    def __init__(self, config, fieldfn, cachefile=None, maxpasses=3):
        self.config = config
        self.fieldfn = fieldfn
        self.cachefile = cachefile
        self.maxpasses = maxpasses
        self.accumulator = StripAccumulator(
            weldToleranceOverride=config.weldToleranceOverride)
        self.engine = ContourEngine(sink=self.accumulator)
        self.workingConfig = config
        self.curves = None

    @property
    def geometry(self):
        c = self.workingConfig
        return GridGeometry(c.limits, c.secondaryColumns, c.secondaryRows)

    @property
    def weldMultiplier(self):
        return weldMultiplier(self.workingConfig)

    @property
    def tolerance(self):
        """Intersection search tolerance in grid cells."""
        c = self.workingConfig
        return max(1, max(c.secondaryColumns // c.primaryColumns,
                          c.secondaryRows // c.primaryRows) // 4)

    def generateOnce(self, config):
        """Generate and compact contours for config."""
        self.workingConfig = config
        self.engine.setConfig(config, self.fieldfn)
        curves = self.engine.generate()
        curves = self.accumulator.compact(curves)
        curves.selfHealed = self.engine.selfHealed
        self.curves = curves
        return curves

    def run(self):
        """Return contours, from the cache if possible.

        When not extrapolating to the boundary rectangle, the contours
        are regenerated while their bounding box is unchanged or they
        end on the boundary, with the limits expanded around the box.
        Contours for expanded limits are not cached, as they could not
        be matched to the configuration when read back.
        """

        if self.cachefile and self.load(self.cachefile):
            logger.debug('contours read from cache %s', self.cachefile)
            self.stitch()
            return self.curves

        config = self.config
        curves = self.generateOnce(config)

        if not config.extrapolateToBoundaryRectangle:
            prevbox = config.limits
            for passnum in range(1, self.maxpasses):
                box = curves.boundingBox()
                if box is None:
                    break
                if not (_sameBox(box, prevbox) or curves.touchesBoundary()):
                    break
                prevbox = box
                config = self._expandedConfig(config, box)
                logger.info('pass %i: limits expanded to %s', passnum+1,
                            config.limits)
                curves = self.generateOnce(config)

        if self.cachefile:
            if config is self.config:
                self.persist(self.cachefile)
            else:
                # the cache records the grid spacing but not the limits
                logger.info(
                    'contours for expanded limits %s not written to cache %s',
                    config.limits, self.cachefile)
        self.stitch()
        return curves

    def stitch(self):
        """Remake the extra strips of every level of the contours.

        Strips are only stitched for fields with discontinuities.
        """
        curves = self.curves
        curves.extraStrips = [[] for l in curves.levels]
        if curves.discontinuities:
            for k in range(len(curves.levels)):
                self.stitchLevel(k)
        return curves

    def _expandedConfig(self, config, box):
        """Config with limits grown around box."""
        x0, x1, y0, y1 = box
        w = (x1 - x0) or config.limits[1] - config.limits[0]
        h = (y1 - y0) or config.limits[3] - config.limits[2]
        limits = (x0 - w, x1 + w, y0 - h, y1 + h)

        cols, rows = config.secondaryColumns, config.secondaryRows
        old = config.limits
        if ( math.ceil((limits[1]-limits[0]) / (old[1]-old[0])) >= 2 or
             math.ceil((limits[3]-limits[2]) / (old[3]-old[2])) >= 2 ):
            cols = min(cols*2, MAX_SECONDARY)
            rows = min(rows*2, MAX_SECONDARY)

        return config._replace(
            limits=limits, secondaryColumns=cols, secondaryRows=rows)

    def persist(self, filename):
        """Write the contours to a binary cache file.

        Returns True if written. The file is replaced atomically.
        """

        if self.curves is None:
            logger.warning('no contours to write to %s', filename)
            return False
        c = self.curves
        data = cache.encodeCurves(
            c.stripLists, c.deltaX, c.deltaY, c.discontinuities)
        try:
            utils.atomicWrite(filename, data)
        except OSError as e:
            logger.warning('could not write contour cache %s: %s',
                           filename, e)
            return False
        return True

    def load(self, filename):
        """Read contours from a binary cache file.

        The number of levels and the grid spacing must match the
        configuration. Returns True if the contours were loaded.
        """

        levels = list(self.config.levels)
        geometry = GridGeometry(
            self.config.limits, self.config.secondaryColumns,
            self.config.secondaryRows)

        try:
            with open(filename, 'rb') as f:
                data = f.read()
        except OSError as e:
            logger.info('could not read contour cache %s: %s', filename, e)
            return False

        try:
            stripLists, dx, dy, discont = cache.decodeCurves(
                data, numnodes=geometry.numNodes)
        except cache.CacheFormatError as e:
            logger.info('contour cache %s not used: %s', filename, e)
            return False

        # a self healed set has two more levels and discontinuities
        if not ( len(stripLists) == len(levels) or
                 (len(stripLists) == len(levels)+2 and discont) ):
            logger.info('contour cache %s has %i levels, expected %i',
                        filename, len(stripLists), len(levels))
            return False

        if not (math.isclose(dx, geometry.deltaX) and
                math.isclose(dy, geometry.deltaY)):
            logger.info('contour cache %s has a different grid spacing',
                        filename)
            return False

        if len(stripLists) == len(levels)+2:
            levels = [sentinelBelow(levels)] + levels + [sentinelAbove(levels)]

        curves = IsoCurveSet(levels, geometry, stripLists, discont)
        curves.selfHealed = len(levels) != len(self.config.levels)
        self.workingConfig = self.config
        self.curves = curves
        return True

    def findIntersections(self, stripA, stripB, tolerance):
        """Return IntersectionRecords where two strips meet.

        If the strips are the same, nodes visited more than once are
        returned. Otherwise, for each node of stripA, grid nodes
        spiralling out from it are checked for membership of stripB
        within the weld distance.
        """

        if stripA is stripB or stripA == stripB:
            nodes = stripA[:-1] if isClosed(stripA) else stripA
            counts = {}
            for n in nodes:
                counts[n] = counts.get(n, 0) + 1
            return _unique([IntersectionRecord(n, n) for n in nodes
                            if counts[n] > 1])

        geom = self.geometry
        weld = tolerance * math.hypot(geom.deltaX, geom.deltaY)
        if self.workingConfig.weldToleranceOverride:
            weld *= self.weldMultiplier
        weld2 = weld*weld

        inB = set(stripB)
        offsets = list(spiralOffsets(tolerance))
        records = []
        for node in stripA:
            col, row = geom.getColumnRow(node)
            for ox, oy in offsets:
                c, r = col+ox, row+oy
                if c < 0 or r < 0 or c > geom.columns or r > geom.rows:
                    continue
                cand = geom.getIndex(c, r)
                if cand in inB and geom.distance2(node, cand) <= weld2:
                    records.append(IntersectionRecord(node, cand))
                    break
        return _unique(records)

    def findBoundaryIntersections(self, stripA, stripB, tolerance):
        """As findIntersections, adding the ends of stripA if open."""
        records = self.findIntersections(stripA, stripB, tolerance)
        if stripA and not isClosed(stripA):
            records = [IntersectionRecord(stripA[0], stripA[0]),
                       IntersectionRecord(stripA[-1], stripA[-1])] + records
        return _unique(records)

    def isDirectlyConnected(self, strip, index, jIndex, others):
        """Are index and jIndex on strip with no node of others between?"""
        if not strip:
            return False
        p0 = _findPos(strip, index)
        p1 = _findPos(strip, jIndex)
        if p0 is None or p1 is None or p0 == p1:
            return False
        lo, hi = min(p0, p1), max(p0, p1)
        between = set(strip[lo+1:hi])
        return not any([o in between for o in others])

    def hasBigGaps(self, strip):
        """Are any consecutive nodes of strip far apart?"""
        geom = self.geometry
        limit2 = 50. * (geom.deltaX**2 + geom.deltaY**2)
        for a, b in zip(strip[:-1], strip[1:]):
            if geom.distance2(a, b) > limit2:
                return True
        return False

    def _subPath(self, strip, start, end):
        """Nodes of strip from start to end inclusive, or None.

        If start occurs more than once the strip crosses itself;
        the last occurrence is used and crossed is returned True.
        Returns (nodes, crossed).
        """
        p0 = _findPos(strip, start)
        p1 = _findPos(strip, end)
        if p0 is None or p1 is None:
            return None, False
        crossed = False
        again = _findPos(strip, start, p0+1)
        if again is not None and again != len(strip)-1:
            crossed = True
            p0 = again
        if p0 <= p1:
            return strip[p0:p1+1], crossed
        return strip[p1:p0+1][::-1], crossed

    def synthesizeStrip(self, stripListA, stripListB, indices, jIndices,
                        nPoints, level=None):
        """Make a closed strip through nPoints intersection points.

        indices[i] and jIndices[i] are the two nodes of intersection i.
        stripListA[i] and stripListB[i] are the strips which may join
        point i to point i+1. If one strip already holds every point it
        is copied. Otherwise the sub paths joining successive points are
        concatenated, using a straight join where no strip holds both.

        If level is given the strip is added to the extra strips of
        that level. Returns the new strip.
        """

        if nPoints < 2:
            raise ValueError('At least two points are needed')

        for family in (stripListA, stripListB):
            for strip in family[:nPoints]:
                if strip and all([i in strip for i in indices[:nPoints]]):
                    newstrip = list(strip)
                    if not isClosed(newstrip):
                        newstrip.append(newstrip[0])
                    return self._addExtra(newstrip, level)

        newstrip = []
        def append(nodes):
            for n in nodes:
                if not newstrip or newstrip[-1] != n:
                    newstrip.append(n)

        for i in range(nPoints):
            j = (i+1) % nPoints
            pairs = ( (indices[i], indices[j]), (indices[i], jIndices[j]),
                      (jIndices[i], jIndices[j]), (jIndices[i], indices[j]) )

            nodes = None
            crossed = False
            for strip in (_item(stripListA, i), _item(stripListB, i)):
                if not strip:
                    continue
                for start, end in pairs:
                    nodes, crossed = self._subPath(strip, start, end)
                    if nodes is not None:
                        break
                if nodes is not None:
                    break

            if nodes is None:
                append([indices[i]])
            else:
                append(nodes)
            if crossed:
                logger.debug('strip crosses itself at node %i', nodes[0])
                break

        if newstrip and newstrip[0] != newstrip[-1]:
            newstrip.append(newstrip[0])
        return self._addExtra(newstrip, level)

    def _addExtra(self, strip, level):
        if level is not None and self.curves is not None:
            self.curves.extraStrips[level].append(strip)
        return strip

    def stitchLevel(self, level):
        """Make extra strips for a level from strip intersections.

        Open strips which meet each other, together with the points
        where they end on the boundary, are made into a graph. For each
        successive pair of boundary points, going around the boundary,
        a path through the graph is searched for and made into a closed
        strip. Returns the new strips.
        """

        curves = self.curves
        strips = [s for s in curves.stripLists[level] if not isClosed(s)]
        if len(strips) < 2:
            return []

        geom = self.geometry
        tol = self.tolerance

        # intersection points between the open strips
        points = []
        owners = []
        for a in range(len(strips)):
            for b in range(a+1, len(strips)):
                for rec in self.findIntersections(strips[a], strips[b], tol):
                    if rec.index not in [p.index for p in points]:
                        points.append(rec)
                        owners.append((strips[a], strips[b]))
        if not points:
            return []
        numinner = len(points)

        # ends of strips on the boundary, in anticlockwise order
        ends = []
        for s in strips:
            for n in (s[0], s[-1]):
                if geom.isNodeOnBoundary(n) and n not in [e[0] for e in ends]:
                    ends.append((n, s))
        ends.sort(key=lambda e: _perimeterPosition(geom, e[0]))
        for n, s in ends:
            points.append(IntersectionRecord(n, n))
            owners.append((s, None))

        graph = BoundaryGraph(len(points))
        edgestrips = {}
        allnodes = ( [p.index for p in points[:numinner]] +
                     [p.jIndex for p in points[:numinner]] )
        for p in range(len(points)):
            for q in range(p+1, len(points)):
                pairnodes = set(points[p]) | set(points[q])
                others = [n for n in allnodes if n not in pairnodes]
                for strip in owners[p] + owners[q]:
                    if strip is None:
                        continue
                    if any([self.isDirectlyConnected(strip, a, b, others)
                            for a in set(points[p])
                            for b in set(points[q])]):
                        graph.addEdge(p, q)
                        edgestrips.setdefault((p, q), strip)
                        break

        # successive boundary points are joined along the boundary
        nb = len(ends) if len(ends) > 1 else 0
        for i in range(nb):
            graph.addEdge(numinner+i, numinner+(i+1) % nb)

        newstrips = []
        for i in range(nb):
            src = numinner+i
            tgt = numinner+(i+1) % nb
            path = graph.biDirectionalSearch(src, tgt)
            if path is None:
                continue
            n = len(path)
            listA = []
            for m in range(n):
                key = tuple(sorted((path[m], path[(m+1) % n])))
                listA.append(edgestrips.get(key, []))
            newstrip = self.synthesizeStrip(
                listA, [[]]*n, [points[p].index for p in path],
                [points[p].jIndex for p in path], n, level)
            newstrips.append(newstrip)

        logger.debug('level %i: %i extra strips', level, len(newstrips))
        return newstrips

def _item(seq, i):
    return seq[i] if i < len(seq) else None

def _sameBox(a, b, tol=1e-9):
    scale = max([abs(v) for v in tuple(a)+tuple(b)] + [1.])
    return all([abs(x-y) <= tol*scale for x, y in zip(a, b)])

def _perimeterPosition(geom, index):
    """Distance anticlockwise around the boundary from bottom left."""
    xmin, xmax, ymin, ymax = geom.limits
    w = xmax - xmin
    h = ymax - ymin
    x = geom.getX(index)
    y = geom.getY(index)
    tol = 1e-6
    if abs(y-ymin) < tol:
        return x - xmin
    if abs(x-xmax) < tol:
        return w + (y - ymin)
    if abs(y-ymax) < tol:
        return w + h + (xmax - x)
    return 2*w + h + (ymax - y)
