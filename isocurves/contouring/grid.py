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

"""Grid geometry, engine configuration and node storage.

Nodes of the secondary grid are numbered row by row:
index = row*(secondaryColumns+1) + column
"""

import math
from collections import namedtuple

import numpy as N

from .. import utils

# largest secondary grid allowed; gaps are stored as int16
MAX_SECONDARY = 4096

# tolerance for a node lying on a limit of the domain
BOUNDARY_TOL = 1e-6

EngineConfig = namedtuple(
    'EngineConfig',
    ('levels', 'limits', 'primaryColumns', 'primaryRows',
     'secondaryColumns', 'secondaryRows',
     'extrapolateToBoundaryRectangle', 'weldToleranceOverride'))

def makeEngineConfig(levels, limits=(-1., 1., -1., 1.),
                     primaryGrid=(64, 64), secondaryGrid=(1024, 1024),
                     extrapolateToBoundaryRectangle=True,
                     weldToleranceOverride=False, numLevels=None):
    """Check parameters and return an EngineConfig.

    primaryGrid and secondaryGrid are (columns, rows) pairs.
    If numLevels is given, the number of levels must match it.
    Raises utils.ConfigurationError on bad parameters.
    """

    try:
        levels = tuple([float(v) for v in levels])
    except (TypeError, ValueError):
        raise utils.ConfigurationError('Levels should be a list of numbers')
    if len(levels) == 0:
        raise utils.ConfigurationError('At least one level is needed')
    if numLevels is not None and numLevels != len(levels):
        raise utils.ConfigurationError(
            'Expected %i levels, got %i' % (numLevels, len(levels)))
    if not all([math.isfinite(v) for v in levels]):
        raise utils.ConfigurationError('Levels must be finite')

    limits = utils.checkLimits(limits)

    dims = []
    for name, grid in (('primary', primaryGrid), ('secondary', secondaryGrid)):
        try:
            cols, rows = [int(v) for v in grid]
        except (TypeError, ValueError):
            raise utils.ConfigurationError(
                'The %s grid should be (columns, rows)' % name)
        if cols < 2 or rows < 2:
            raise utils.ConfigurationError(
                'The %s grid must be at least 2x2' % name)
        dims += [cols, rows]

    if dims[2] > MAX_SECONDARY or dims[3] > MAX_SECONDARY:
        raise utils.ConfigurationError(
            'The secondary grid must be at most %ix%i' % (
                MAX_SECONDARY, MAX_SECONDARY))

    return EngineConfig(
        levels, limits, dims[0], dims[1], dims[2], dims[3],
        bool(extrapolateToBoundaryRectangle), bool(weldToleranceOverride))

def weldMultiplier(config):
    """Ratio of primary to secondary cell size, at least 1.

    Used to scale the distances at which strip ends are joined."""
    return max(1., math.hypot(config.secondaryColumns // config.primaryColumns,
                              config.secondaryRows // config.primaryRows))

class GridGeometry:
    """Mapping between secondary grid node indices and coordinates."""

    def __init__(self, limits, columns, rows):
        self.limits = tuple(limits)
        self.columns = columns
        self.rows = rows
        xmin, xmax, ymin, ymax = self.limits
        self.deltaX = (xmax - xmin) / columns
        self.deltaY = (ymax - ymin) / rows

    def __eq__(self, other):
        return ( isinstance(other, GridGeometry) and
                 self.limits == other.limits and
                 self.columns == other.columns and
                 self.rows == other.rows )

    def __repr__(self):
        return '<GridGeometry limits=%s grid=%ix%i>' % (
            self.limits, self.columns, self.rows)

    @property
    def numNodes(self):
        """Number of nodes in the secondary grid."""
        return (self.columns+1) * (self.rows+1)

    def getIndex(self, col, row):
        return row*(self.columns+1) + col

    def getColumnRow(self, index):
        """Return (column, row) of node index."""
        row, col = divmod(index, self.columns+1)
        return col, row

    def getX(self, index):
        return self.limits[0] + (index % (self.columns+1))*self.deltaX

    def getY(self, index):
        return self.limits[2] + (index // (self.columns+1))*self.deltaY

    def nearestIndex(self, x, y):
        """Index of the node nearest to coordinate (x, y), clipped to grid."""
        col = int(math.floor((x - self.limits[0])/self.deltaX + 0.5))
        row = int(math.floor((y - self.limits[2])/self.deltaY + 0.5))
        col = min(max(col, 0), self.columns)
        row = min(max(row, 0), self.rows)
        return self.getIndex(col, row)

    def isValidIndex(self, index):
        return 0 <= index < self.numNodes

    def isNodeOnBoundary(self, index):
        """Is the node on one of the four edges of the domain?"""
        xmin, xmax, ymin, ymax = self.limits
        x = self.getX(index)
        y = self.getY(index)
        return ( abs(x-xmin) < BOUNDARY_TOL or abs(x-xmax) < BOUNDARY_TOL or
                 abs(y-ymin) < BOUNDARY_TOL or abs(y-ymax) < BOUNDARY_TOL )

    def distance2(self, i1, i2):
        """Squared distance between two nodes."""
        dx = self.getX(i1) - self.getX(i2)
        dy = self.getY(i1) - self.getY(i2)
        return dx*dx + dy*dy

    def coordinates(self, strip):
        """Return a (n, 2) numpy array of the coordinates of strip."""
        idx = N.asarray(strip, dtype=N.int64)
        cols = idx % (self.columns+1)
        rows = idx // (self.columns+1)
        out = N.empty((len(idx), 2), dtype=N.float64)
        out[:,0] = self.limits[0] + cols*self.deltaX
        out[:,1] = self.limits[2] + rows*self.deltaY
        return out

GridNode = namedtuple('GridNode', ('value', 'left', 'right', 'top', 'bottom'))

class ColumnWindow:
    """Ring buffer of columns of grid nodes.

    Only a window of consecutive columns is stored. Column x lives in
    slot x % size; a slot can be claimed by a new column once the
    column it holds is no longer needed.

    For each node: value is the cached field value; left, right, top
    and bottom are gaps to the neighbouring evaluated nodes in grid
    units. top is -1 if the value has not been evaluated.
    """

    def __init__(self, size, rows):
        self.size = size
        self.rows = rows
        self.value = N.full((size, rows), N.nan, dtype=N.float64)
        self.left = N.zeros((size, rows), dtype=N.int16)
        self.right = N.zeros((size, rows), dtype=N.int16)
        self.top = N.full((size, rows), -1, dtype=N.int16)
        self.bottom = N.zeros((size, rows), dtype=N.int16)
        self.owner = N.full(size, -1, dtype=N.int64)

    def claim(self, xlo, xhi):
        """Make columns xlo to xhi (inclusive) live and unevaluated."""
        if xhi - xlo + 1 > self.size:
            raise RuntimeError('Too many columns for window')
        for x in range(xlo, xhi+1):
            s = x % self.size
            self.value[s] = N.nan
            self.left[s] = self.right[s] = self.bottom[s] = 0
            self.top[s] = -1
            self.owner[s] = x

    def slot(self, x):
        """Return slot holding column x."""
        s = x % self.size
        if self.owner[s] != x:
            raise RuntimeError(
                'Column %i read outside of window (slot holds %i)' % (
                    x, self.owner[s]))
        return s

    def node(self, x, y):
        """Return the GridNode at column x, row y."""
        s = self.slot(x)
        return GridNode(float(self.value[s, y]), int(self.left[s, y]),
                        int(self.right[s, y]), int(self.top[s, y]),
                        int(self.bottom[s, y]))
