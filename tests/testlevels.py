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
#    You should have received a copy of the GNU General Public License
#    along with this program; if not, write to the Free Software
#    Foundation, Inc., 59 Temple Place, Suite 330, Boston, MA  02111-1307  USA
###############################################################################

import math
import unittest

from isocurves.contouring import levels

class TestLevels(unittest.TestCase):

    def assertLevels(self, got, expected):
        self.assertEqual(len(got), len(expected))
        for g, e in zip(got, expected):
            self.assertAlmostEqual(g, e)

    def testLinear(self):
        self.assertLevels(levels.calculateLevels(0., 1., 6),
                          [0., 0.2, 0.4, 0.6, 0.8, 1.])
        # reversed range
        self.assertLevels(levels.calculateLevels(1., 0., 3), [0., 0.5, 1.])
        # equal range falls back to unit range
        self.assertLevels(levels.calculateLevels(2., 2., 3), [0., 0.5, 1.])

    def testSingle(self):
        self.assertEqual(levels.calculateLevels(4., 10., 1), [4.])

    def testLog(self):
        self.assertLevels(levels.calculateLevels(1., 100., 3, scaling='log'),
                          [1., 10., 100.])
        # non positive minimum is replaced
        out = levels.calculateLevels(-5., 100., 3, scaling='log')
        self.assertAlmostEqual(out[0], 1.)
        self.assertAlmostEqual(out[-1], 100.)

    def testSqrtSquared(self):
        self.assertLevels(levels.calculateLevels(0., 4., 3, scaling='sqrt'),
                          [0., 1., 4.])
        self.assertLevels(
            levels.calculateLevels(0., 2., 3, scaling='squared'),
            [0., math.sqrt(2.), 2.])

    def testManual(self):
        self.assertEqual(
            levels.calculateLevels(0., 1., 3, scaling='manual',
                                   manuallevels=[5, 1, 3]),
            [1., 3., 5.])

    def testNice(self):
        self.assertLevels(levels.calculateLevels(0., 1., 6, scaling='nice'),
                          [0., 0.2, 0.4, 0.6, 0.8, 1.])

        out = levels.calculateLevels(0.13, 9.7, 6, scaling='nice')
        self.assertTrue(out[0] <= 0.13)
        self.assertTrue(out[-1] >= 9.7)
        self.assertTrue(len(out) <= 6)

    def testNiceScale(self):
        self.assertEqual(levels.niceScale(1., 0., 5), None)
        self.assertEqual(levels.niceScale(0., 1., 1), None)
        vmin, vmax, step = levels.niceScale(0., 1., 6)
        self.assertAlmostEqual(vmin, 0.)
        self.assertAlmostEqual(vmax, 1.)
        self.assertAlmostEqual(step, 0.2)

    def testBadScaling(self):
        self.assertRaises(ValueError, levels.calculateLevels, 0., 1., 3,
                          scaling='cubic')

    def testSubLevels(self):
        self.assertLevels(levels.calculateSubLevels([0., 1., 2.], 2),
                          [0.5, 1.5])
        self.assertEqual(levels.calculateSubLevels([0.], 2), [])
        self.assertLevels(
            levels.calculateSubLevels([0., 1., 3.], 2, scaling='manual'),
            [0.5, 2.])

    def testSampleFieldRange(self):
        def field(x, y):
            if x > 0.5:
                return float('nan')
            return x + y
        fmin, fmax = levels.sampleFieldRange(field, (0., 1., 0., 1.))
        self.assertAlmostEqual(fmin, 0.)
        self.assertAlmostEqual(fmax, 1.5)

        self.assertEqual(
            levels.sampleFieldRange(lambda x, y: float('inf'),
                                    (0., 1., 0., 1.)),
            (0., 1.))

if __name__ == '__main__':
    unittest.main()
