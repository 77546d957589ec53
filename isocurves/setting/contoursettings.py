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

"""Settings for contouring a field."""

import logging

from .. import utils
from ..contouring import grid
from ..contouring import levels as levelsmod
from .settings import Settings
from . import setting

logger = logging.getLogger(__name__)

class ContourSettings(Settings):
    """Settings controlling the contour engine and stitcher."""

    def __init__(self, name='contour', **args):
        Settings.__init__(self, name, **args)

        self.add( setting.FloatList(
            'levels', [],
            descr='Contour levels to use. If empty, levels are calculated '
            'from the number of levels and scaling') )
        self.add( setting.Limits(
            'limits', (-1., 1., -1., 1.),
            descr='Region to contour (xmin, xmax, ymin, ymax)') )
        self.add( setting.Int(
            'primaryColumns', 64, minval=2,
            descr='Number of columns in the primary grid') )
        self.add( setting.Int(
            'primaryRows', 64, minval=2,
            descr='Number of rows in the primary grid') )
        self.add( setting.Int(
            'secondaryColumns', 1024, minval=2, maxval=grid.MAX_SECONDARY,
            descr='Number of columns in the secondary grid') )
        self.add( setting.Int(
            'secondaryRows', 1024, minval=2, maxval=grid.MAX_SECONDARY,
            descr='Number of rows in the secondary grid') )
        self.add( setting.Bool(
            'extrapolateToBoundaryRectangle', True,
            descr='Contour to the edge of the limits. If false, the '
            'limits are expanded until the contours are enclosed') )
        self.add( setting.Bool(
            'weldToleranceOverride', False,
            descr='Use a larger distance when joining strip ends') )

        self.add( setting.Int(
            'numLevels', 5, minval=1,
            descr='Number of levels to calculate') )
        self.add( setting.Choice(
            'scaling', levelsmod.scalings, 'linear',
            descr='Spacing of calculated levels') )
        self.add( setting.FloatOrAuto(
            'minimum', 'Auto',
            descr='Lowest calculated level (or Auto)') )
        self.add( setting.FloatOrAuto(
            'maximum', 'Auto',
            descr='Highest calculated level (or Auto)') )
        self.add( setting.FloatList(
            'manualLevels', [],
            descr='Levels to use for manual scaling') )

        self.add( setting.Str(
            'cacheFile', '',
            descr='Binary file to cache contours in (empty for none)') )
        self.add( setting.Int(
            'maxPasses', 3, minval=1, maxval=100,
            descr='Passes allowed when expanding the limits') )

    def calculateLevels(self, fieldfn=None):
        """Return the levels to contour at.

        The levels setting is used if it is not empty. Otherwise levels
        are calculated, sampling the field for Auto minimum or maximum.
        """

        if self.levels:
            return list(self.levels)

        minval, maxval = self.minimum, self.maximum
        if ( self.scaling != 'manual' and
             (minval == 'Auto' or maxval == 'Auto') ):
            if fieldfn is None:
                raise utils.ConfigurationError(
                    'A field is needed to find the range for Auto levels')
            fmin, fmax = levelsmod.sampleFieldRange(fieldfn, self.limits)
            if minval == 'Auto':
                minval = fmin
            if maxval == 'Auto':
                maxval = fmax
            logger.debug('level range %g to %g', minval, maxval)

        return levelsmod.calculateLevels(
            minval, maxval, self.numLevels, scaling=self.scaling,
            manuallevels=self.manualLevels)

    def engineConfig(self, fieldfn=None):
        """Return a checked EngineConfig for these settings.

        Raises utils.ConfigurationError on a bad configuration.
        """

        return grid.makeEngineConfig(
            self.calculateLevels(fieldfn), self.limits,
            primaryGrid=(self.primaryColumns, self.primaryRows),
            secondaryGrid=(self.secondaryColumns, self.secondaryRows),
            extrapolateToBoundaryRectangle=
              self.extrapolateToBoundaryRectangle,
            weldToleranceOverride=self.weldToleranceOverride)
