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

import io
import unittest

from isocurves.contouring import strips
from isocurves.contouring.grid import GridGeometry

class TestStripFunctions(unittest.TestCase):

    def testIsClosed(self):
        self.assertTrue(strips.isClosed([1, 2, 3, 1]))
        self.assertFalse(strips.isClosed([1, 2, 3]))
        self.assertFalse(strips.isClosed([1, 1]))
        self.assertFalse(strips.isClosed([]))

    def testMerge(self):
        a = [1, 2, 3]
        self.assertTrue(strips.mergeStrips(a, [3, 4]))
        self.assertEqual(a, [1, 2, 3, 4])

        a = [1, 2, 3]
        self.assertTrue(strips.mergeStrips(a, [5, 4, 3]))
        self.assertEqual(a, [1, 2, 3, 4, 5])

        a = [1, 2, 3]
        self.assertTrue(strips.mergeStrips(a, [7, 1]))
        self.assertEqual(a, [7, 1, 2, 3])

        a = [1, 2, 3]
        self.assertTrue(strips.mergeStrips(a, [1, 8, 9]))
        self.assertEqual(a, [9, 8, 1, 2, 3])

        a = [1, 2, 3]
        self.assertFalse(strips.mergeStrips(a, [4, 5]))
        self.assertFalse(strips.mergeStrips(a, [3, 4, 5, 3]))
        self.assertEqual(a, [1, 2, 3])

    def testRemoveDuplicates(self):
        self.assertEqual(strips.removeDuplicateNodes([1, 1, 2, 2, 2, 3, 1]),
                         [1, 2, 3, 1])
        self.assertEqual(strips.removeDuplicateNodes([]), [])

    def testSplitAtBoundary(self):
        onb = lambda i: i >= 100
        self.assertEqual(strips.splitAtBoundary([100, 1, 2, 101], onb),
                         [[100, 1, 2, 101]])
        self.assertEqual(
            strips.splitAtBoundary([100, 1, 2, 102, 3, 4, 101], onb),
            [[100, 1, 2, 102], [102, 3, 4, 101]])
        # short pieces are dropped
        self.assertEqual(
            strips.splitAtBoundary([100, 1, 102, 103, 4, 5, 101], onb),
            [[100, 1, 102], [103, 4, 5, 101]])

class TestAccumulator(unittest.TestCase):

    def setUp(self):
        # unit spacing, nodes numbered row*11+col
        self.geom = GridGeometry((0., 10., 0., 10.), 10, 10)
        self.acc = strips.StripAccumulator()
        self.acc.beginPass([0.], self.geom, 1.)

    def idx(self, col, row):
        return self.geom.getIndex(col, row)

    def testChaining(self):
        acc = self.acc
        acc.onSegment(0, 1, 2)
        acc.onSegment(0, 2, 3)
        acc.onSegment(0, 0, 1)
        acc.onSegment(0, 7, 8)
        acc.onSegment(0, 5, 5)
        curves = acc.endPass(set())
        self.assertEqual(curves.stripLists, [[[7, 8], [0, 1, 2, 3]]])

    def testCompactCloses(self):
        acc = self.acc
        i = self.idx
        ring = [i(3, 3), i(4, 3), i(5, 4), i(4, 5), i(3, 4), i(3, 3)]
        for a, b in zip(ring[:-1], ring[1:]):
            acc.onSegment(0, a, b)
        curves = acc.compact(acc.endPass(set()))
        self.assertEqual(len(curves[0]), 1)
        strip = curves[0][0]
        self.assertTrue(strips.isClosed(strip))
        self.assertEqual(sorted(set(strip)), sorted(set(ring)))
        self.assertEqual(curves.unpaired[0], [])

    def testCompactWeld(self):
        acc = self.acc
        i = self.idx
        # two pieces with a one cell gap, and a loose closing gap
        acc.onSegment(0, i(2, 2), i(5, 2))
        acc.onSegment(0, i(5, 2), i(6, 5))
        acc.onSegment(0, i(6, 6), i(2, 6))
        acc.onSegment(0, i(2, 6), i(2, 3))
        curves = acc.compact(acc.endPass(set()))
        self.assertEqual(len(curves[0]), 1)
        self.assertTrue(strips.isClosed(curves[0][0]))

    def testBoundaryStrip(self):
        acc = self.acc
        i = self.idx
        acc.onSegment(0, i(0, 5), i(5, 5))
        acc.onSegment(0, i(5, 5), i(10, 5))
        curves = acc.compact(acc.endPass(set()))
        self.assertEqual(curves[0], [[i(0, 5), i(5, 5), i(10, 5)]])
        self.assertEqual(curves.unpaired[0], [])

    def testUnpaired(self):
        acc = self.acc
        i = self.idx
        acc.onSegment(0, i(0, 5), i(3, 5))
        acc.onSegment(0, i(3, 5), i(5, 5))
        curves = acc.compact(acc.endPass(set()))
        self.assertEqual(len(curves[0]), 1)
        self.assertEqual(curves.unpaired[0], [0])

        # override keeps the strip without diagnostics
        acc = strips.StripAccumulator(weldToleranceOverride=True)
        acc.beginPass([0.], self.geom, 1.)
        acc.onSegment(0, i(0, 5), i(3, 5))
        acc.onSegment(0, i(3, 5), i(5, 5))
        curves = acc.compact(acc.endPass(set()))
        self.assertEqual(len(curves[0]), 1)
        self.assertEqual(curves.unpaired[0], [])

    def testWeldDistances(self):
        acc = self.acc
        acc.weldMultiplier = 2.
        close2, join2 = acc.weldDistances(False)
        self.assertEqual(close2, 2.)
        self.assertEqual(join2, 4.)
        close2, join2 = acc.weldDistances(True)
        self.assertEqual(join2, 8.)

    def testCompactNothing(self):
        acc = strips.StripAccumulator()
        self.assertRaises(RuntimeError, acc.compact)

class TestIsoCurveSet(unittest.TestCase):

    def setUp(self):
        self.geom = GridGeometry((0., 4., 0., 4.), 4, 4)
        g = self.geom.getIndex
        self.square = [g(1, 1), g(3, 1), g(3, 3), g(1, 3), g(1, 1)]
        self.line = [g(0, 2), g(2, 2), g(4, 2)]
        self.curves = strips.IsoCurveSet(
            [0., 1.], self.geom, [[self.square], [self.line]], {7, 3})

    def testBasics(self):
        c = self.curves
        self.assertEqual(len(c), 2)
        self.assertEqual(c.numStrips(), 2)
        self.assertEqual(c.discontinuities, [3, 7])
        self.assertEqual(list(c.iterStrips()),
                         [(0, self.square), (1, self.line)])
        self.assertEqual(c.deltaX, 1.)
        self.assertEqual(c.getX(self.square[1]), 3.)

    def testMeasures(self):
        c = self.curves
        self.assertEqual(c.area(0, 0), 4.)
        self.assertEqual(c.area(1, 0), 0.)
        self.assertEqual(c.edgeWeight(0, 0), 8.)
        self.assertEqual(c.edgeWeight(1, 0), 4.)
        self.assertEqual(c.boundingBox(), (0., 4., 1., 3.))
        self.assertTrue(c.touchesBoundary())

        empty = strips.IsoCurveSet([0.], self.geom)
        self.assertEqual(empty.boundingBox(), None)
        self.assertFalse(empty.touchesBoundary())

    def testEquality(self):
        other = strips.IsoCurveSet(
            [0., 1.], self.geom, [[list(self.square)], [list(self.line)]],
            [3, 7])
        self.assertEqual(self.curves, other)
        other.stripLists[1][0].reverse()
        self.assertNotEqual(self.curves, other)

    def testWriteText(self):
        out = io.StringIO()
        self.curves.writeText(out)
        lines = out.getvalue().split('\n')
        self.assertEqual(lines[0], '# level 0 0.0')
        self.assertEqual(lines[1], '1.0\t1.0')
        self.assertEqual(lines[6], '')
        self.assertEqual(lines[7], '# level 1 1.0')
        self.assertEqual(lines[8], '0.0\t2.0')

if __name__ == '__main__':
    unittest.main()
