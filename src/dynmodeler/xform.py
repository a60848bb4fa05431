## generalized matrix transformation operations for 3D homogeneous
## coordinates in dynmodeler

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2024 dynmodeler contributors
## All rights reserved

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

from math import acos, cos, degrees, sin, sqrt

import numpy as np

import dynmodeler.geom as geom

## a matrix is represented as a list of four four vectors, one per
## row.  Vectors multiplied on the right (Mx) are column vectors, so
## the translation lives in the last column.  Composition is always
## done by the caller choosing the order of mul(): A.mul(B) applies B
## first and A second to a point.


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self,a=None):
        self.m = [[1.0,0.0,0.0,0.0],
                  [0.0,1.0,0.0,0.0],
                  [0.0,0.0,1.0,0.0],
                  [0.0,0.0,0.0,1.0]]

        if a is None:
            return
        if isinstance(a,Matrix):
            for i in range(4):
                self.setrow(i,list(a.getrow(i)))
            return
        if isinstance(a,np.ndarray):
            if a.shape != (4,4):
                raise ValueError('bad array shape in matrix initialization: {}'.format(a.shape))
            a = a.tolist()
        if isinstance(a,(tuple,list)):
            if len(a) == 4 and all(isinstance(r,(tuple,list)) and len(r) == 4 for r in a):
                values = [a[i][j] for i in range(4) for j in range(4)]
            elif len(a) == 16:
                values = list(a)
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
            for ind, x in enumerate(values):
                if not geom.isgoodnum(x):
                    raise ValueError('bad element in matrix initialization: {}'.format(x))
                self.m[ind//4][ind%4] = float(x)
            return
        raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0],self.m[1],
                                            self.m[2],self.m[3])

    #return value indexed by i,j
    def get(self,i,j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        return self.m[i][j]

    #set value indexed by i,j
    def set(self,i,j,x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i,j))
        if not geom.isgoodnum(x):
            raise ValueError('bad value passed to set: {}'.format(x))
        self.m[i][j]=x

    def getrow(self,i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i]

    def getcol(self,j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j],
                self.m[1][j],
                self.m[2][j],
                self.m[3][j]]

    def setrow(self,i,x):
        if not geom.isvect(x):
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        self.m[i] = list(x)

    # matrix multiply.  If x is a matrix, compute MX.  If X is a
    # vector, compute Mx. If x is a scalar, compute xM.

    def mul(self,x):
        if isinstance(x,Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.m[i][j] = geom.dot4(self.getrow(i),x.getcol(j))
            return result
        elif geom.isvect(x):
            result = geom.vect()
            for i in range(4):
                result[i]=geom.dot4(self.getrow(i),x)
            return result
        elif geom.isgoodnum(x):
            result = Matrix()
            for i in range(4):
                result.setrow(i,geom.scale4(self.getrow(i),x))
            return result

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    ## in-place operations, used by tools that keep a working matrix
    ## between runs

    def identity(self):
        """reset this matrix to the identity, in place"""
        for i in range(4):
            for j in range(4):
                self.m[i][j] = 1.0 if i == j else 0.0
        return self

    def concatenate(self,x):
        """post-multiply in place, ``self = self * x``"""
        self.m = self.mul(x).m
        return self

    def inverse(self):
        try:
            inv = np.linalg.inv(self.as_array())
        except np.linalg.LinAlgError:
            raise ValueError('singular matrix has no inverse: {}'.format(self))
        return Matrix(inv)

    def translation(self):
        """the translation column as a point"""
        return geom.point(self.m[0][3],self.m[1][3],self.m[2][3])

    def transform_point(self,p):
        return geom.homo(self.mul(geom.point(p)))

    def transform_vector(self,v):
        d = geom.vect(v)
        d[3] = 0.0
        r = self.mul(d)
        r[3] = 0.0
        return r

    def as_array(self):
        return np.array(self.m,dtype=float)

    def isclose(self,x,tol=geom.epsilon):
        for i in range(4):
            for j in range(4):
                if abs(self.m[i][j]-x.m[i][j]) > tol:
                    return False
        return True

    def isidentity(self,tol=geom.epsilon):
        return self.isclose(Identity(),tol)

    def copy(self):
        return Matrix(self)


def Identity():
    return Matrix()

# return the generalized 4x4 arbitrary axis rotation matrix, angle in
# degrees, counterclockwise about ``axis``
def Rotation(axis,angle,inverse=False):
    m = geom.mag(axis)
    u = axis
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    if not geom.close(m,1.0):
        u = geom.scale3(axis,1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle%360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang,0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang,0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin,0],
         [0,0,0,1]]

    return Matrix(R)

def Translation(delta,inverse=False):
    if inverse:
        delta = geom.scale3(delta,-1.0)
    dx = delta[0]
    dy = delta[1]
    dz = delta[2]
    T = [[1,0,0,dx],
         [0,1,0,dy],
         [0,0,1,dz],
         [0,0,0,1]]
    return Matrix(T)

## recover the rotation of the upper 3x3 block as an axis and an angle
## in [0, 180] degrees.  A pure translation (or the identity) reports
## the z axis and a zero angle.
def axis_angle(mat):
    R = [[mat.get(i,j) for j in range(3)] for i in range(3)]
    c = (R[0][0]+R[1][1]+R[2][2]-1.0)/2.0
    c = max(-1.0,min(1.0,c))
    ang = acos(c)
    if degrees(ang) < geom.epsilon:
        return [0.0,0.0,1.0,0.0], 0.0

    s = sin(ang)
    if s > 1.0e-6:
        axis = [(R[2][1]-R[1][2])/(2.0*s),
                (R[0][2]-R[2][0])/(2.0*s),
                (R[1][0]-R[0][1])/(2.0*s),
                0.0]
    else:
        # half turn: R = 2uu^T - I, read u off the dominant diagonal
        xx = (R[0][0]+1.0)/2.0
        yy = (R[1][1]+1.0)/2.0
        zz = (R[2][2]+1.0)/2.0
        if xx >= yy and xx >= zz:
            x = sqrt(max(xx,0.0))
            axis = [x,(R[0][1]+R[1][0])/(4.0*x),(R[0][2]+R[2][0])/(4.0*x),0.0]
        elif yy >= zz:
            y = sqrt(max(yy,0.0))
            axis = [(R[0][1]+R[1][0])/(4.0*y),y,(R[1][2]+R[2][1])/(4.0*y),0.0]
        else:
            z = sqrt(max(zz,0.0))
            axis = [(R[0][2]+R[2][0])/(4.0*z),(R[1][2]+R[2][1])/(4.0*z),z,0.0]

    n = geom.normalize(axis)
    if n is None:
        return [0.0,0.0,1.0,0.0], 0.0
    n[3] = 0.0
    return n, degrees(ang)
