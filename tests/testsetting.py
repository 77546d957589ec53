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

import unittest

from isocurves import setting
from isocurves import utils

# test setting routines

class TestSettings(unittest.TestCase):

    def testStr(self):
        s = setting.Str('test', 'foobar')
        self.assertEqual(s.name, 'test')
        self.assertEqual(s.get(), 'foobar')

        s.set('plugh')
        self.assertEqual(s.get(), 'plugh')

        s.set( s.fromText('hi') )
        self.assertEqual(s.get(), 'hi')

        self.assertRaises(utils.InvalidType, s.set, 10)

    def testBool(self):
        s = setting.Bool('test', True)
        self.assertEqual(s.get(), True)

        s.set(False)
        self.assertEqual(s.get(), False)
        s.set(1)
        self.assertEqual(s.get(), True)

        self.assertRaises(utils.InvalidType, s.set, 'foo')
        self.assertRaises(utils.InvalidType, s.set, 3.14)

        s.set( s.fromText('tRuE') )
        self.assertEqual(s.get(), True)
        s.set( s.fromText('0') )
        self.assertEqual(s.get(), False)

    def testInt(self):
        s = setting.Int('test', 42, minval=2, maxval=4096)
        self.assertEqual(s.get(), 42)
        s.set(89)
        self.assertEqual(s.get(), 89)
        self.assertEqual(s.toText(), '89')

        s.set( s.fromText('43') )
        self.assertEqual(s.get(), 43)

        self.assertRaises(utils.InvalidType, s.set, 'foo')
        self.assertRaises(utils.InvalidType, s.set, 1)
        self.assertRaises(utils.InvalidType, s.set, 5000)
        self.assertRaises(utils.InvalidType, s.set, True)
        self.assertRaises(utils.InvalidType, s.fromText, 'foo')

    def testFloat(self):
        s = setting.Float('test', 1.5)
        s.set(2)
        self.assertEqual(s.get(), 2.)
        s.set( s.fromText(' -3.25 ') )
        self.assertEqual(s.get(), -3.25)

        self.assertRaises(utils.InvalidType, s.set, float('nan'))
        self.assertRaises(utils.InvalidType, s.set, 'x')
        self.assertRaises(utils.InvalidType, s.fromText, 'inf')

    def testFloatOrAuto(self):
        s = setting.FloatOrAuto('test', 'Auto')
        self.assertEqual(s.get(), 'Auto')
        self.assertEqual(s.toText(), 'Auto')
        s.set(3.)
        self.assertEqual(s.toText(), '3.0')
        s.set( s.fromText('auto') )
        self.assertEqual(s.get(), 'Auto')

    def testChoice(self):
        choices = ('linear', 'log', 'nice')
        s = setting.Choice('test', choices, 'linear')
        self.assertEqual(s.get(), 'linear')

        s.set('log')
        self.assertEqual(s.get(), 'log')
        s.set( s.fromText('nice') )
        self.assertEqual(s.get(), 'nice')

        self.assertRaises(utils.InvalidType, s.set, 'foo')
        self.assertRaises(utils.InvalidType, s.fromText, 'bar')

    def testFloatList(self):
        s = setting.FloatList('test', [])
        s.set([1, 2.5])
        self.assertEqual(s.get(), [1., 2.5])
        self.assertEqual(s.toText(), '1.0, 2.5')
        s.set( s.fromText('0.1 1, 2') )
        self.assertEqual(s.get(), [0.1, 1., 2.])

        self.assertRaises(utils.InvalidType, s.set, 3.)
        self.assertRaises(utils.InvalidType, s.set, [1., float('inf')])
        self.assertRaises(utils.InvalidType, s.set, [True])

    def testLimits(self):
        s = setting.Limits('test', (-1, 1, -1, 1))
        self.assertEqual(s.get(), (-1., 1., -1., 1.))
        s.set( s.fromText('0, 2, 0, 4') )
        self.assertEqual(s.get(), (0., 2., 0., 4.))

        self.assertRaises(utils.InvalidType, s.set, (1, 0, 0, 1))
        self.assertRaises(utils.InvalidType, s.set, (0, 1, 0, 0))
        self.assertRaises(utils.InvalidType, s.set, (0, 1, 0))
        self.assertRaises(utils.InvalidType, s.set, (0, float('nan'), 0, 1))

    def testDefault(self):
        s = setting.Float('test', 1.)
        self.assertTrue(s.isDefault())
        s.val = 2.
        self.assertFalse(s.isDefault())
        s.reset()
        self.assertEqual(s.val, 1.)

        # defaults are checked too
        self.assertRaises(utils.InvalidType, setting.Int, 'test', 1, minval=2)

    def testCopy(self):
        s = setting.Int('test', 3, minval=2, maxval=10)
        s.val = 5
        c = s.copy()
        self.assertEqual(c.val, 5)
        self.assertEqual(c.maxval, 10)
        c.val = 6
        self.assertEqual(s.val, 5)

    def testSettings(self):
        ss = setting.Settings('my settings')
        ss.add( setting.Int('dna', 42) )
        ss.add( setting.Str('name', 'x') )

        self.assertEqual(ss.dna, 42)
        ss.dna = 43
        self.assertEqual(ss['dna'], 43)
        self.assertTrue('dna' in ss)
        self.assertEqual(ss.getNames(), ['dna', 'name'])
        self.assertRaises(utils.InvalidType, setattr, ss, 'dna', 'foo')
        self.assertRaises(RuntimeError, ss.add, setting.Int('dna', 1))

        text = ss.saveText(False)
        self.assertEqual(text, 'dna = 43\n')

        other = setting.Settings('other')
        other.add( setting.Int('dna', 1) )
        other.add( setting.Str('name', 'x') )
        other.loadText(text)
        self.assertEqual(other.dna, 43)

        ss.update({'dna': 7, 'name': 'y'})
        self.assertEqual((ss.dna, ss.name), (7, 'y'))
        self.assertRaises(KeyError, ss.update, {'nothing': 1})
        self.assertRaises(AttributeError, getattr, ss, 'nothing')

    def testSettingNames(self):
        ss = setting.Settings('container', descr='about')
        ss.add( setting.Str('name', 'x') )
        ss.add( setting.Str('descr', 'y') )
        self.assertEqual((ss.name, ss.descr), ('x', 'y'))
        ss.name = 'z'
        self.assertEqual(ss.get('name').val, 'z')

        c = ss.copy()
        self.assertEqual(c.__dict__['name'], 'container')
        self.assertEqual(c.__dict__['descr'], 'about')
        self.assertEqual((c.name, c.descr), ('z', 'y'))

        for name in ('copy', 'get', 'setdict', 'setnames'):
            self.assertRaises(RuntimeError, ss.add, setting.Int(name, 1))

class TestContourSettings(unittest.TestCase):

    def testDefaults(self):
        s = setting.ContourSettings()
        self.assertEqual(s.limits, (-1., 1., -1., 1.))
        self.assertEqual(s.primaryColumns, 64)
        self.assertEqual(s.secondaryRows, 1024)
        self.assertEqual(s.scaling, 'linear')
        self.assertEqual(s.maxPasses, 3)
        self.assertTrue(s.extrapolateToBoundaryRectangle)

    def testGridRange(self):
        s = setting.ContourSettings()
        self.assertRaises(utils.InvalidType, setattr, s, 'primaryRows', 1)
        self.assertRaises(utils.InvalidType, setattr, s,
                          'secondaryColumns', 4097)
        s.secondaryColumns = 4096
        self.assertEqual(s.secondaryColumns, 4096)

    def testExplicitLevels(self):
        s = setting.ContourSettings()
        s.levels = [0.5, -0.5]
        s.primaryColumns = s.primaryRows = 4
        s.secondaryColumns = s.secondaryRows = 16
        config = s.engineConfig()
        self.assertEqual(config.levels, (0.5, -0.5))
        self.assertEqual(config.primaryColumns, 4)
        self.assertEqual(config.secondaryRows, 16)
        self.assertEqual(config.limits, (-1., 1., -1., 1.))

    def testCalculatedLevels(self):
        s = setting.ContourSettings()
        s.minimum = 0.
        s.maximum = 1.
        s.numLevels = 3
        self.assertEqual(s.engineConfig().levels, (0., 0.5, 1.))

    def testAutoLevels(self):
        s = setting.ContourSettings()
        s.numLevels = 2
        config = s.engineConfig(lambda x, y: x)
        self.assertAlmostEqual(config.levels[0], -1.)
        self.assertAlmostEqual(config.levels[1], 1.)

        # auto range needs a field
        self.assertRaises(utils.ConfigurationError, s.engineConfig)

    def testManualLevels(self):
        s = setting.ContourSettings()
        s.scaling = 'manual'
        s.manualLevels = [3., 1.]
        self.assertEqual(s.calculateLevels(), [1., 3.])

        s.manualLevels = []
        self.assertRaises(utils.ConfigurationError, s.engineConfig)

    def testCopy(self):
        s = setting.ContourSettings()
        s.numLevels = 7
        c = s.copy()
        self.assertEqual(c.numLevels, 7)
        self.assertEqual(c.get('secondaryColumns').maxval, 4096)

if __name__ == '__main__':
    unittest.main()
