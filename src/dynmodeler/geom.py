## homogeneous vector helpers for dynmodeler
## Copyright (c) 2020 Richard DeVaul
## Copyright (c) 2024 dynmodeler contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""vector helpers for **dynmodeler**

Vectors are lists of four numbers ``[x, y, z, w]``.  Points live in
the ``w=1`` hyperplane, directions are usually given with ``w=0`` but
most R^3 functions below ignore ``w`` entirely.  Angles are in
degrees, matching :mod:`dynmodeler.xform`.
"""

from math import atan2, degrees, pi, sqrt

## constants
epsilon = 0.000005
pi2 = 2.0*pi

## operations on scalars
## -----------------------

## booleans are ints as far as isinstance() is concerned, but they are
## never a sensible coordinate

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif a is False:
        pass
    else:
        # lists, tuples, numpy rows
        try:
            items = [float(x) for x in a]
        except TypeError:
            raise ValueError('bad argument to vect(): {}'.format(a))
        for i in range(min(4,len(items))):
            r[i]=items[i]
    return r

def point(x=False,y=False,z=False):
    """Point creation from a sequence or from scalars, always w=1"""
    if isgoodnum(x):
        p = vect(x,y,z)
    else:
        p = vect(x)
    p[3] = 1.0
    return p

def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

## determine if two vectors are the same, to within epsilon
def vclose(a,b):
    return close(mag(sub(a,b)),0)

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def cross(a,b):
    """Compute the cross product of a x b, result in the w=1 hyperplane"""
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

def normalize(a):
    """unit 3 vector in the direction of ``a``, or ``None`` if ``a`` is
    shorter than epsilon"""
    m = mag(a)
    if m < epsilon:
        return None
    return scale3(a,1.0/m)

## pick the cardinal axis least aligned with ``a`` and cross with it,
## so the result is stable for a given input
def perpendicular(a):
    """unit 3 vector orthogonal to ``a``"""
    ax = abs(a[0])
    ay = abs(a[1])
    az = abs(a[2])
    if ax <= ay and ax <= az:
        other = [1,0,0,1]
    elif ay <= az:
        other = [0,1,0,1]
    else:
        other = [0,0,1,1]
    p = normalize(cross(a,other))
    if p is None:
        raise ValueError('zero-length vector has no perpendicular')
    return p

## R^4 -> R^4 functions: operate on w component
def scale4(a,c):
    """ 4 vector ``a`` times scalar ``c``"""
    return [a[0]*c,a[1]*c,a[2]*c,a[3]*c]

def homo(a):
    """Homogenize, or project back to the w=1 plane by scaling all values by w"""
    return [ a[0]/a[3],
             a[1]/a[3],
             a[2]/a[3],
             1 ]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def signed_angle(a,b,axis):
    """angle in degrees that takes ``a`` onto ``b``, negative when the
    rotation runs clockwise about ``axis``"""
    c = cross(a,b)
    ang = degrees(atan2(mag(c),dot(a,b)))
    if dot(c,axis) < 0:
        ang = -ang
    return ang

## R^4 -> R functions
## ----------------------------------------
def dot4(a,b):
    """ 4 vect dot product"""
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]+a[3]*b[3]
