#!/usr/bin/env python

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


'''Contour a formula from the command line.'''

import sys
import logging
import argparse

from isocurves import utils
from isocurves import setting
from isocurves.contouring import ContourSet

copyr='''isocurves %s

Copyright (C) Jeremy Sanders 2003-2025 <jeremy@jeremysanders.net>
 and contributors
Licenced under the GNU General Public Licence (version 2 or greater)
'''

logger = logging.getLogger('isocurves.main')

def makeParser():
    '''Return the argument parser.'''

    parser = argparse.ArgumentParser(
        prog='isocurves',
        description='Write contours of a formula in x and y as text')
    parser.add_argument(
        '--version', action='version',
        version=copyr % utils.version())
    parser.add_argument(
        'formula',
        help='formula to contour, e.g. "x**2+y**2" (numpy functions '
        'are allowed)')
    parser.add_argument(
        '--limits', type=float, nargs=4,
        metavar=('XMIN', 'XMAX', 'YMIN', 'YMAX'),
        help='region to contour (default -1 1 -1 1)')
    parser.add_argument(
        '--levels', type=float, nargs='+', metavar='VAL',
        help='contour levels (default: calculated)')
    parser.add_argument(
        '--num-levels', type=int, metavar='N',
        help='number of levels to calculate')
    parser.add_argument(
        '--scaling', choices=setting.ContourSettings().get(
            'scaling').vallist,
        help='spacing of calculated levels')
    parser.add_argument(
        '--primary', type=int, nargs=2, metavar=('COLS', 'ROWS'),
        help='size of primary grid')
    parser.add_argument(
        '--secondary', type=int, nargs=2, metavar=('COLS', 'ROWS'),
        help='size of secondary grid')
    parser.add_argument(
        '--no-extrapolate', action='store_true',
        help='expand the limits until the contours are enclosed')
    parser.add_argument(
        '--cache', metavar='FILE',
        help='binary file to read and write contours')
    parser.add_argument(
        '--settings', metavar='FILE',
        help='read "name = value" settings from FILE before applying '
        'the other options')
    parser.add_argument(
        '--save-settings', metavar='FILE',
        help='write the settings used to FILE')
    parser.add_argument(
        '--output', metavar='FILE',
        help='write contours to this file instead of stdout')
    parser.add_argument(
        '--verbose', '-v', action='count', default=0,
        help='show progress messages (twice for debugging)')
    return parser

def settingsFromArgs(args):
    '''Make ContourSettings from parsed arguments.

    Raises utils.InvalidType for bad values or unreadable settings
    files.'''

    s = setting.ContourSettings()
    if args.settings:
        try:
            with open(args.settings) as f:
                s.loadText(f.read())
        except OSError as e:
            raise utils.InvalidType(
                'cannot read %s: %s' % (args.settings, e.strerror))
        except KeyError as e:
            raise utils.InvalidType('in %s: %s' % (args.settings, e.args[0]))

    if args.limits is not None:
        s.limits = args.limits
    if args.levels:
        s.levels = args.levels
    if args.num_levels is not None:
        s.numLevels = args.num_levels
    if args.scaling is not None:
        s.scaling = args.scaling
    if args.primary is not None:
        s.primaryColumns, s.primaryRows = args.primary
    if args.secondary is not None:
        s.secondaryColumns, s.secondaryRows = args.secondary
    if args.no_extrapolate:
        s.extrapolateToBoundaryRectangle = False
    if args.cache:
        s.cacheFile = args.cache
    return s

def run(argv=None):
    '''Run the command line tool, returning the exit status.'''

    parser = makeParser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(
        args.verbose, logging.DEBUG)
    utils.setupLogging(level)

    try:
        fieldfn = utils.fieldFunction(args.formula)
    except utils.SafeEvalException as e:
        parser.error('bad formula: %s' % e)

    try:
        s = settingsFromArgs(args)
        config = s.engineConfig(fieldfn)
    except (utils.InvalidType, utils.ConfigurationError) as e:
        parser.error('bad option: %s' % e)

    if args.save_settings:
        try:
            with open(args.save_settings, 'w') as f:
                f.write(s.saveText())
        except OSError as e:
            logger.error('could not write %s: %s', args.save_settings, e)
            return 1

    logger.info('contouring %s at levels %s', args.formula,
                ', '.join(['%g' % l for l in config.levels]))
    cset = ContourSet(config, fieldfn, cachefile=s.cacheFile or None,
                      maxpasses=s.maxPasses)
    try:
        curves = cset.run()
    except utils.SafeEvalException as e:
        parser.error('bad formula: %s' % e)
    for k in range(len(curves.levels)):
        curves.dumpLevel(k)

    if args.output:
        try:
            with open(args.output, 'w') as f:
                curves.writeText(f)
        except OSError as e:
            logger.error('could not write %s: %s', args.output, e)
            return 1
    else:
        curves.writeText(sys.stdout)
    return 0

# if ran as a program
if __name__ == '__main__':
    sys.exit(run())
