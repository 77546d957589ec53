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

"""Named collections of settings."""

class Settings(object):
    """An ordered collection of settings, reachable as attributes.

    s.numLevels = 7 checks and stores the value in the numLevels
    setting; s.get('numLevels') returns the setting itself.
    """

    def __init__(self, name, descr=''):
        self.__dict__['setdict'] = {}
        self.name = name
        self.descr = descr
        self.setnames = []

    def add(self, setting):
        """Add a new setting, which must have a unique name."""
        if setting.name in self.setdict:
            raise RuntimeError(
                "Setting '%s' is already present" % setting.name)
        if ( setting.name in ('setdict', 'setnames') or
             hasattr(self.__class__, setting.name) ):
            raise RuntimeError(
                "Setting name '%s' is reserved" % setting.name)
        self.setdict[setting.name] = setting
        self.setnames.append(setting.name)
        setting.parent = self

    def copy(self):
        """Return a copy with independent settings."""
        s = self.__class__.__new__(self.__class__)
        Settings.__init__(
            s, self.__dict__['name'], descr=self.__dict__['descr'])
        for name in self.setnames:
            s.add(self.setdict[name].copy())
        return s

    def getNames(self):
        return list(self.setnames)

    def get(self, name):
        """Return the setting object called name."""
        try:
            return self.setdict[name]
        except KeyError:
            raise KeyError("'%s' is not a setting" % name)

    def __contains__(self, name):
        return name in self.setdict

    def __getattribute__(self, name):
        # settings take priority over attributes of the container
        setdict = object.__getattribute__(self, '__dict__').get('setdict', {})
        if name in setdict:
            return setdict[name].val
        return object.__getattribute__(self, name)

    def __getattr__(self, name):
        raise AttributeError("'%s' is not a setting" % name)

    def __setattr__(self, name, val):
        if name in self.setdict:
            self.setdict[name].val = val
        else:
            self.__dict__[name] = val

    def __getitem__(self, name):
        return self.get(name).val

    def update(self, values):
        """Set several settings from a dict of name: value."""
        for name, val in values.items():
            self.get(name).val = val

    def saveText(self, saveall=False):
        """Return "name = value" lines which restore the settings.

        Only changed settings are written unless saveall is set."""
        return ''.join([
            '%s = %s\n' % (name, self.setdict[name].toText())
            for name in self.setnames
            if saveall or not self.setdict[name].isDefault()])

    def loadText(self, text):
        """Set values from text written by saveText.

        Blank lines and lines starting with # are skipped. Raises
        utils.InvalidType for bad values and KeyError for unknown
        names."""

        for line in text.splitlines():
            line = line.strip()
            if not line or line[0] == '#':
                continue
            name, _, value = line.partition('=')
            setn = self.get(name.strip())
            setn.val = setn.fromText(value.strip())
