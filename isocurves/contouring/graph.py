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

"""Undirected graph of strip intersections and boundary points."""

from collections import deque

def isRotation(a, b):
    """Is sequence b a cyclic rotation of sequence a?"""
    if len(a) != len(b):
        return False
    if not a:
        return True
    n = len(a)
    for shift in range(n):
        if a[shift] == b[0] and all(
                [a[(shift+i) % n] == b[i] for i in range(n)]):
            return True
    return False

class BoundaryGraph:
    """Graph with nodes numbered 0 to numnodes-1.

    Paths found by biDirectionalSearch are collected in paths, without
    repeats.
    """

    def __init__(self, numnodes):
        self.adjacency = [[] for i in range(numnodes)]
        self.paths = []

    def __len__(self):
        return len(self.adjacency)

    def addEdge(self, a, b):
        if b not in self.adjacency[a]:
            self.adjacency[a].append(b)
        if a not in self.adjacency[b]:
            self.adjacency[b].append(a)

    def removeEdge(self, a, b):
        """Remove edge a-b, returning whether it existed."""
        if b not in self.adjacency[a]:
            return False
        self.adjacency[a].remove(b)
        self.adjacency[b].remove(a)
        return True

    def hasEdge(self, a, b):
        return b in self.adjacency[a]

    def _step(self, queue, parents, otherparents):
        """Visit the neighbours of the next node in queue.

        Returns a node seen from both sides, or None."""
        node = queue.popleft()
        for nbr in self.adjacency[node]:
            if nbr not in parents:
                parents[nbr] = node
                queue.append(nbr)
                if nbr in otherparents:
                    return nbr
        return None

    def _search(self, source, target):
        """Breadth first search from both ends, returning the path."""
        srcparents = {source: None}
        tgtparents = {target: None}
        srcqueue = deque([source])
        tgtqueue = deque([target])

        meet = None
        while srcqueue and tgtqueue:
            meet = self._step(srcqueue, srcparents, tgtparents)
            if meet is not None:
                break
            meet = self._step(tgtqueue, tgtparents, srcparents)
            if meet is not None:
                break
        if meet is None:
            return None

        path = []
        node = meet
        while node is not None:
            path.append(node)
            node = srcparents[node]
        path.reverse()
        node = tgtparents[meet]
        while node is not None:
            path.append(node)
            node = tgtparents[node]
        return path

    def biDirectionalSearch(self, source, target):
        """Find a path from source to target not using a direct edge.

        Returns the path as a list of nodes if it has more than two
        nodes and is not a rotation of an earlier path; the path is
        then added to paths. Otherwise returns None.
        """

        if source == target:
            return None

        adj = self.adjacency
        saved = list(adj[source]), list(adj[target])
        self.removeEdge(source, target)
        try:
            path = self._search(source, target)
        finally:
            adj[source], adj[target] = saved

        if path is None or len(path) <= 2:
            return None
        for p in self.paths:
            if isRotation(p, path):
                return None
        self.paths.append(path)
        return path
