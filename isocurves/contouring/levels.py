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

"""Calculation of contour levels from a field range."""

import math

import numpy as N

scalings = ('linear', 'sqrt', 'log', 'squared', 'manual', 'nice')

# units for step lengths, Applied Statistics algorithm AS 96
_units = (1.0, 1.5, 2.0, 2.5, 3.0, 4.0, 5.0, 6.0, 8.0, 10.0)
_tol = 5e-6
_bias = 1e-4

def niceScale(fmin, fmax, nmarks):
    """Choose an "easy on the eye" scale covering fmin to fmax.

    Returns (valmin, valmax, step) where the scale has nmarks marks
    from valmin to valmax. Returns None if fmax < fmin or nmarks < 2.
    """

    if fmax < fmin or nmarks <= 1:
        return None

    rn = nmarks - 1
    x = abs(fmax)
    if x == 0.:
        x = 1.
    if (fmax-fmin)/x <= _tol:
        # all values (nearly) the same
        if fmax < 0.:
            fmax = 0.
        elif fmax == 0.:
            fmax = 1.
        else:
            fmin = 0.

    rawstep = (fmax-fmin) / rn
    s = rawstep
    while s < 1.:
        s *= 10.
    while s >= 10.:
        s /= 10.

    x = s - _bias
    unit = 0
    while unit < len(_units)-1 and x > _units[unit]:
        unit += 1

    power = 1.
    while True:
        step = rawstep * _units[unit] * power / s
        vrange = step * rn

        # first estimate of valmin
        x = 0.5 * (1. + (fmin+fmax-vrange) / step)
        j = int(x - _bias)
        if x < 0.:
            j -= 1
        valmin = step * j

        # can valmin be zero?
        if fmin >= 0. and vrange >= fmax:
            valmin = 0.
        valmax = valmin + vrange

        # can valmax be zero?
        if not (fmax > 0. or vrange < -fmin):
            valmax = 0.
            valmin = -vrange

        if valmin <= fmin and valmax >= fmax:
            return valmin, valmax, step

        # scale too small, so try next unit
        unit += 1
        if unit == len(_units):
            unit = 1
            power *= 10.

def sampleFieldRange(fieldfn, limits, samples=33):
    """Estimate the range of a field over limits by sampling on a grid.

    Returns (minval, maxval); non finite values are ignored. If no
    finite values are found (0., 1.) is returned.
    """

    xmin, xmax, ymin, ymax = limits
    vals = N.array([
        fieldfn(float(x), float(y))
        for y in N.linspace(ymin, ymax, samples)
        for x in N.linspace(xmin, xmax, samples) ], dtype=N.float64)
    vals = vals[N.isfinite(vals)]
    if len(vals) == 0:
        return 0., 1.
    return float(vals.min()), float(vals.max())

def calculateLevels(minval, maxval, numlevels, scaling='linear',
                    manuallevels=()):
    """Calculate contour levels.

    Returns levels as a list of floats
    """

    if scaling not in scalings:
        raise ValueError('Unknown level scaling "%s"' % scaling)

    if scaling == 'manual':
        return sorted([float(v) for v in manuallevels])

    if numlevels == 1:
        # calculations below assume numlevels > 1
        return [float(minval)]

    # trap out silly cases
    if minval == maxval:
        minval = 0.
        maxval = 1.
    if minval > maxval:
        minval, maxval = maxval, minval

    if scaling == 'linear':
        delta = (maxval - minval) / (numlevels-1)
        levels = minval + N.arange(numlevels)*delta
    elif scaling == 'sqrt':
        delta = N.sqrt(maxval - minval) / (numlevels-1)
        levels = minval + (N.arange(numlevels)*delta)**2
    elif scaling == 'log':
        if minval <= 0.:
            minval = 1.
        if minval >= maxval:
            maxval = minval + 1
        delta = N.log(maxval/minval) / (numlevels-1)
        levels = N.exp(N.arange(numlevels)*delta)*minval
    elif scaling == 'squared':
        delta = (maxval - minval)**2 / (numlevels-1)
        levels = minval + N.sqrt(N.arange(numlevels)*delta)
    else:
        valmin, valmax, step = niceScale(minval, maxval, numlevels)
        nsteps = int(math.floor((valmax-valmin)/step + 0.5))
        levels = valmin + N.arange(nsteps+1)*step

    # we do this to convert array to list of floats
    return [float(i) for i in levels]

def calculateSubLevels(levels, num, scaling='linear'):
    """Calculate num-1 sublevels between each pair of contour levels."""

    if len(levels) <= 1 or num <= 1:
        return []

    minval, maxval = levels[0], levels[-1]
    numcont = (len(levels)-1) * num
    indices = N.arange(numcont)
    indices = indices[indices % num != 0]

    if scaling == 'linear':
        delta = (maxval-minval) / numcont
        slev = indices*delta + minval
    elif scaling == 'log':
        delta = N.log( maxval/minval ) / numcont
        slev = N.exp(indices*delta) * minval
    elif scaling == 'sqrt':
        delta = N.sqrt( maxval-minval ) / numcont
        slev = minval + (indices*delta)**2
    elif scaling == 'squared':
        delta = (maxval-minval)**2 / numcont
        slev = minval + N.sqrt(indices*delta)
    else:
        # manual or nice: divide each interval evenly
        drange = N.arange(1, num)
        out = [[]]
        for conmin, conmax in zip(levels[:-1], levels[1:]):
            delta = (conmax-conmin) / num
            out.append( conmin+drange*delta )
        slev = N.hstack(out)

    return [float(i) for i in slev]
