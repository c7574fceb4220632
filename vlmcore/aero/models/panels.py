"""Panel Records

Immutable records holding the data associated to a single panel: the surface and wake panel geometry, the
Trefftz plane panels and the panel properties computed by the vortex lattice solver.

All the numeric fields of a record share a single floating point precision, given by the ``dtype`` attribute.
It is obtained at construction time by promoting the precision of every argument, so narrower inputs are widened
and wider inputs are never narrowed. Integer and boolean inputs are promoted to ``float64``.
"""
import functools

import numpy as np

import vlmcore.utils.exceptions as exceptions
from vlmcore.utils.constants import NDIM, default_float_type


def promote_dtype(*args):
    """
    Returns the least upper bound of the precision of ``args``.

    Args:
        *args: Scalars, sequences or arrays

    Returns:
        np.dtype: Floating point (or complex) type able to represent all arguments without loss of precision
    """
    dtype = np.result_type(*[np.asarray(arg).dtype for arg in args])
    if not np.issubdtype(dtype, np.inexact):
        dtype = np.result_type(dtype, default_float_type)
    return dtype


def grid_dtype(grid):
    """
    Returns the precision of a grid of panel records.

    Args:
        grid (np.ndarray): Array of panel records (``dtype=object``) or numeric array

    Returns:
        np.dtype: Promoted precision of all the records in the grid. ``float64`` if the grid holds no records.
    """
    grid = np.asarray(grid)
    if grid.dtype != object:
        return promote_dtype(grid)

    dtypes = [record.dtype for record in grid.flat if record is not None]
    if not dtypes:
        return np.dtype(default_float_type)
    return functools.reduce(np.promote_types, dtypes)


def empty_grid(shape):
    """
    Returns an array of the given shape to store panel records. All cells hold ``None`` until written.
    """
    return np.full(shape, None, dtype=object)


class PanelRecord(object):
    """
    Base class for the immutable panel records.

    Subclasses define ``_fields``, a tuple of ``(name, shape)`` pairs in the order of the constructor arguments.
    """
    _fields = ()

    def _set_fields(self, *args):
        dtype = promote_dtype(*args)
        for (name, shape), value in zip(self._fields, args):
            array = np.array(value, dtype=dtype)
            if array.shape != shape:
                raise ValueError('%s.%s has shape %s, expected %s' % (self.__class__.__name__,
                                                                       name, array.shape, shape))
            if shape == ():
                field = dtype.type(array)
            else:
                array.flags.writeable = False
                field = array
            object.__setattr__(self, name, field)
        object.__setattr__(self, 'dtype', dtype)

    def __setattr__(self, name, value):
        raise AttributeError('%s is immutable, create a new instance instead' % self.__class__.__name__)

    def __delattr__(self, name):
        raise AttributeError('%s is immutable' % self.__class__.__name__)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        if self.dtype != other.dtype:
            return False
        return all(np.array_equal(getattr(self, name), getattr(other, name)) for name, _ in self._fields)

    __hash__ = None

    def __repr__(self):
        values = ', '.join('%s=%s' % (name, np.array2string(np.asarray(getattr(self, name))))
                           for name, _ in self._fields)
        return '%s(%s, dtype=%s)' % (self.__class__.__name__, values, self.dtype)

    def values(self):
        """Returns the fields in constructor order"""
        return tuple(getattr(self, name) for name, _ in self._fields)

    def astype(self, dtype, casting='safe'):
        """
        Returns a copy of the record with precision ``dtype``.

        Args:
            dtype: Target precision
            casting (str): ``numpy`` casting rule. The default ``'safe'`` refuses to narrow the precision.

        Raises:
            exceptions.NarrowingPrecisionError: if the cast is not allowed by ``casting``.
        """
        dtype = np.dtype(dtype)
        if not np.can_cast(self.dtype, dtype, casting=casting):
            raise exceptions.NarrowingPrecisionError(self.dtype, dtype)
        return self.__class__(*[np.asarray(value).astype(dtype) for value in self.values()])

    @classmethod
    def zeros(cls, dtype=default_float_type):
        """Returns a record with every field set to zero"""
        return cls(*[np.zeros(shape, dtype=dtype) for _, shape in cls._fields])


class PanelProperties(PanelRecord):
    """
    Panel specific properties calculated during the vortex lattice method analysis.

    Attributes:
        gamma: Vortex ring circulation strength, normalised by the freestream velocity
        velocity (np.ndarray): Local velocity at the panel's bound vortex centre, normalised by the freestream
          velocity ``[3]``
        cfb (np.ndarray): Net force on the panel's bound vortex, as calculated using the Kutta-Joukowski theorem,
          normalised by the dynamic pressure times the reference area ``[3]``
        cfl (np.ndarray): Force on the left bound vortex from this panel's vortex ring ``[3]``
        cfr (np.ndarray): Force on the right bound vortex from this panel's vortex ring ``[3]``
        dtype (np.dtype): Precision shared by all fields
    """
    _fields = (('gamma', ()),
               ('velocity', (NDIM,)),
               ('cfb', (NDIM,)),
               ('cfl', (NDIM,)),
               ('cfr', (NDIM,)))

    def __init__(self, gamma, velocity, cfb, cfl, cfr):
        self._set_fields(gamma, velocity, cfb, cfl, cfr)


class SurfacePanel(PanelRecord):
    """
    Geometry of a panel of a lifting surface.

    Attributes:
        rtl, rtc, rtr (np.ndarray): Top left, centre and right vertices of the bound vortex ``[3]``
        rbl, rbc, rbr (np.ndarray): Bottom left, centre and right vertices of the vortex ring ``[3]``
        rcp (np.ndarray): Control point ``[3]``
        ncp (np.ndarray): Unit normal at the control point ``[3]``
        core_size: Finite core size
        chord: Panel chord length
    """
    _fields = (('rtl', (NDIM,)),
               ('rtc', (NDIM,)),
               ('rtr', (NDIM,)),
               ('rbl', (NDIM,)),
               ('rbc', (NDIM,)),
               ('rbr', (NDIM,)),
               ('rcp', (NDIM,)),
               ('ncp', (NDIM,)),
               ('core_size', ()),
               ('chord', ()))

    def __init__(self, rtl, rtc, rtr, rbl, rbc, rbr, rcp, ncp, core_size, chord):
        self._set_fields(rtl, rtc, rtr, rbl, rbc, rbr, rcp, ncp, core_size, chord)


class WakePanel(PanelRecord):
    """
    Wake panel shed from the trailing edge of a surface.

    Attributes:
        rtl, rtr, rbl, rbr (np.ndarray): Top left, top right, bottom left and bottom right vertices ``[3]``
        core_size: Finite core size
        gamma: Circulation strength, normalised by the freestream velocity
    """
    _fields = (('rtl', (NDIM,)),
               ('rtr', (NDIM,)),
               ('rbl', (NDIM,)),
               ('rbr', (NDIM,)),
               ('core_size', ()),
               ('gamma', ()))

    def __init__(self, rtl, rtr, rbl, rbr, core_size, gamma):
        self._set_fields(rtl, rtr, rbl, rbr, core_size, gamma)


class TrefftzPanel(PanelRecord):
    """
    Panel in the Trefftz plane, used to integrate the induced drag in the far field.

    Attributes:
        rl, rc, rr (np.ndarray): Left, centre and right points of the panel ``[3]``
        theta: Angle of the panel in the Trefftz plane
        gamma: Circulation strength, normalised by the freestream velocity
    """
    _fields = (('rl', (NDIM,)),
               ('rc', (NDIM,)),
               ('rr', (NDIM,)),
               ('theta', ()),
               ('gamma', ()))

    def __init__(self, rl, rc, rr, theta, gamma):
        self._set_fields(rl, rc, rr, theta, gamma)
