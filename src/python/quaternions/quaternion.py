"""
===============================================================================
QUATERNIONS - Quaternion Algebra
===============================================================================

A quaternion value type over a configurable floating-point precision.
The four components live in a private NumPy array of either float32 or
float64; every arithmetic result is computed in that precision, so the same
code serves single- and double-precision callers.

Convention
----------
Scalar-first:

    q = [w, x, y, z] = w + x*i + y*j + z*k

where w is the scalar (real) part and [x, y, z] the vector (imaginary) part.

No normalization is performed on construction. A quaternion is only a
rotation when it has unit length, and keeping it that way is the caller's
job (see normalized() / is_unit()).

Equality
--------
Two quaternions compare equal when the squared length of their difference
is strictly below the machine epsilon of their (promoted) precision. This
relation is not transitive, and instances are mutable, so they are not
hashable.

Floating-point edge cases
-------------------------
Nothing is guarded. Inverting a zero-length quaternion yields inf/NaN
components, which then propagate through later operations exactly as IEEE
754 arithmetic dictates. NumPy floating-point warnings are switched off
while the arithmetic runs, so overflow and inf*0 stay silent as well.

References
----------
    [1] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [2] Diebel, "Representing Attitude: Euler Angles, Unit Quaternions, and
        Rotation Vectors", Stanford, 2006.

===============================================================================
"""

import functools
import logging
import numbers
from typing import Iterator, Optional, Sequence, Union

import numpy as np

from .config import resolve_dtype
from .constants import SUPPORTED_DTYPES, epsilon

logger = logging.getLogger(__name__)

Scalar = Union[float, int, np.floating]


def _ieee_silent(func):
    """Run func with NumPy floating-point warnings off, so inf/NaN propagate quietly."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with np.errstate(all='ignore'):
            return func(*args, **kwargs)
    return wrapper


class Quaternion:
    """
    Quaternion value w + x*i + y*j + z*k.

    Parameters
    ----------
    w, x, y, z : float
        Components. Any real number is accepted and converted to the
        quaternion's precision, so integer literals work as well.
    dtype : str or numpy dtype, optional
        ``float32`` or ``float64`` (or an alias such as ``"single"``).
        Defaults to the configured default precision.

    Examples
    --------
    >>> a = Quaternion(1, 2, 3, 4)
    >>> b = Quaternion(5, 6, 7, 8)
    >>> (a * b).components
    array([-60.,  12.,  30.,  24.])
    >>> (b * a).components
    array([-60.,  20.,  14.,  32.])
    """

    __slots__ = ('_q',)

    # NumPy scalars on the left defer to __rmul__ instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, w: Scalar = 0.0, x: Scalar = 0.0, y: Scalar = 0.0,
                 z: Scalar = 0.0, dtype=None) -> None:
        self._q = np.array([w, x, y, z], dtype=resolve_dtype(dtype))

    @classmethod
    def _wrap(cls, q: np.ndarray) -> 'Quaternion':
        # Adopt a freshly computed array without copying it again
        obj = cls.__new__(cls)
        obj._q = q
        return obj

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def w(self) -> float:
        """Scalar (real) part."""
        return float(self._q[0])

    @w.setter
    def w(self, value: Scalar) -> None:
        self._q[0] = value

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[1])

    @x.setter
    def x(self, value: Scalar) -> None:
        self._q[1] = value

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[2])

    @y.setter
    def y(self, value: Scalar) -> None:
        self._q[2] = value

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[3])

    @z.setter
    def z(self, value: Scalar) -> None:
        self._q[3] = value

    @property
    def dtype(self) -> np.dtype:
        """Floating-point precision of the components."""
        return self._q.dtype

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a 4-element numpy array [w, x, y, z].

        Returns
        -------
        np.ndarray
            Copy of the internal array, in the quaternion's precision.
        """
        return self._q.copy()

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def identity(cls, dtype=None) -> 'Quaternion':
        """
        Create the identity quaternion [1, 0, 0, 0].

        It is the multiplicative identity: q * identity = identity * q = q.
        """
        return cls(1, 0, 0, 0, dtype=dtype)

    @classmethod
    def id(cls, dtype=None) -> 'Quaternion':
        """Alias of identity()."""
        return cls.identity(dtype=dtype)

    @classmethod
    def zero(cls, dtype=None) -> 'Quaternion':
        """Create the additive identity [0, 0, 0, 0]."""
        return cls(0, 0, 0, 0, dtype=dtype)

    @classmethod
    def from_array(cls, values: Sequence[Scalar], dtype=None) -> 'Quaternion':
        """
        Create a quaternion from a 4-element sequence [w, x, y, z].

        When ``dtype`` is omitted and ``values`` is a float32/float64 array,
        its precision is kept.

        Raises
        ------
        ValueError
            If the sequence does not hold exactly four values.
        """
        if dtype is None and isinstance(values, np.ndarray) and values.dtype in SUPPORTED_DTYPES:
            dtype = values.dtype
        q = np.array(values, dtype=resolve_dtype(dtype)).reshape(-1)
        if q.shape != (4,):
            raise ValueError(f"Quaternion needs 4 components, got {q.size}")
        return cls._wrap(q)

    @classmethod
    @_ieee_silent
    def from_euler_angles(cls, x: Scalar, y: Scalar, z: Scalar,
                          dtype=None) -> 'Quaternion':
        """
        Create the rotation quaternion for Euler angles applied in x-y-z order.

        Parameters
        ----------
        x, y, z : float
            Rotation angles about the X, Y and Z axes (radians).
        dtype : str or numpy dtype, optional
            Precision of the computation and of the result.

        Returns
        -------
        Quaternion
            The quaternion given by the half-angle formula below.

        Notes
        -----
        Using half-angles c_a = cos(a/2), s_a = sin(a/2):

            w = cx*cy*cz + sx*sy*sz
            x = sx*cy*cz + cx*sy*sz
            y = cx*sy*cz + sx*cy*sz
            z = cx*cy*sz + sx*sy*cz

        Every cross term carries a plus sign. The result has unit length for
        zero angles, for a rotation about a single axis and for (pi, pi, pi),
        but not for general angle triples: (0.3, -1.1, 2.4) has squared
        length ~0.822. Normalize the result when a rotation is required.
        """
        t = resolve_dtype(dtype).type
        two = t(2)

        half_x = t(x) / two
        half_y = t(y) / two
        half_z = t(z) / two

        # Each trig function evaluated once, in the target precision
        cx, sx = np.cos(half_x), np.sin(half_x)
        cy, sy = np.cos(half_y), np.sin(half_y)
        cz, sz = np.cos(half_z), np.sin(half_z)

        return cls._wrap(np.array([
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz + cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz + sx * sy * cz,
        ], dtype=t))

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    @_ieee_silent
    def scale(self, t: Scalar) -> 'Quaternion':
        """
        Multiply every component by the scalar t.

        The scalar is converted to this quaternion's precision first, so
        the result keeps the receiver's dtype.
        """
        return Quaternion._wrap(self._q * self._q.dtype.type(t))

    def negate(self) -> 'Quaternion':
        """Flip the sign of every component."""
        return Quaternion._wrap(-self._q)

    def conjugate(self) -> 'Quaternion':
        """
        Return the quaternion conjugate.

        For q = [w, x, y, z], the conjugate is q* = [w, -x, -y, -z].
        """
        q = self._q.copy()
        q[1:] = -q[1:]
        return Quaternion._wrap(q)

    @_ieee_silent
    def dot(self, other: 'Quaternion') -> np.floating:
        """Four-dimensional dot product w1*w2 + x1*x2 + y1*y2 + z1*z2."""
        w1, x1, y1, z1 = self._q
        w2, x2, y2, z2 = other._q
        return w1 * w2 + x1 * x2 + y1 * y2 + z1 * z2

    def square_length(self) -> np.floating:
        """Squared norm w^2 + x^2 + y^2 + z^2."""
        return self.dot(self)

    def length(self) -> np.floating:
        """Euclidean norm sqrt(w^2 + x^2 + y^2 + z^2)."""
        return np.sqrt(self.square_length())

    def inverse(self) -> 'Quaternion':
        """
        Return the multiplicative inverse.

            q^{-1} = q* / |q|^2

        so that q * q^{-1} = q^{-1} * q = identity. For a zero-length
        quaternion the result is non-finite (inf/NaN); no error is raised.

        Returns
        -------
        Quaternion
            The inverse, in this quaternion's precision.
        """
        return Quaternion._wrap(self._inverse_array())

    @_ieee_silent
    def _inverse_array(self) -> np.ndarray:
        norm_sq = self.square_length()
        if norm_sq == 0:
            logger.debug(f"Inverting zero-length quaternion {self!r}; result is non-finite")

        inv_q = self._q * (self._q.dtype.type(1) / norm_sq)
        inv_q[1:] = -inv_q[1:]
        return inv_q

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Multiply this quaternion by another (Hamilton product).

        Quaternion multiplication is NOT commutative: q1 * q2 != q2 * q1
        in general. The product formula is:

            w = w1*w2 - x1*x2 - y1*y2 - z1*z2
            x = w1*x2 + x1*w2 + y1*z2 - z1*y2
            y = w1*y2 - x1*z2 + y1*w2 + z1*x2
            z = w1*z2 + x1*y2 - y1*x2 + z1*w2

        Parameters
        ----------
        other : Quaternion
            The right-hand quaternion in the product.

        Returns
        -------
        Quaternion
            The Hamilton product self * other, in the promoted precision of
            the two operands.
        """
        return Quaternion._wrap(_hamilton(self._q, other._q))

    def divide(self, other: 'Quaternion') -> 'Quaternion':
        """
        Right division: self * other^{-1}.

        Note the order. Dividing by other means multiplying by its inverse
        on the right, never on the left.
        """
        return Quaternion._wrap(_hamilton(self._q, other._inverse_array()))

    def normalized(self) -> 'Quaternion':
        """
        Return a unit-length copy (self / |self|).

        A zero-length quaternion normalizes to NaN components.
        """
        q = self.copy()
        return q.normalize_in_place()

    def is_unit(self, tolerance: Optional[float] = None) -> bool:
        """
        Check whether this quaternion has unit length.

        Parameters
        ----------
        tolerance : float, optional
            Accepted deviation of the squared length from 1.0. Defaults to
            the machine epsilon of this quaternion's precision.
        """
        if tolerance is None:
            tolerance = epsilon(self.dtype)
        return bool(abs(self.square_length() - 1) < tolerance)

    @_ieee_silent
    def approx_eq(self, other: 'Quaternion') -> bool:
        """
        Approximate equality.

        True when |self - other|^2 is strictly below the machine epsilon of
        the promoted precision. NaN components never compare equal.
        """
        diff = self - other
        return bool(diff.square_length() < epsilon(diff.dtype))

    # =========================================================================
    # IN-PLACE VARIANTS
    # =========================================================================
    # Each mirrors its pure counterpart bit for bit but writes into the
    # receiver's own array, which keeps its dtype. All return self.

    @_ieee_silent
    def scale_in_place(self, t: Scalar) -> 'Quaternion':
        self._q *= self._q.dtype.type(t)
        return self

    def conjugate_in_place(self) -> 'Quaternion':
        self._q[1:] = -self._q[1:]
        return self

    def invert_in_place(self) -> 'Quaternion':
        self._q[:] = self._inverse_array()
        return self

    @_ieee_silent
    def normalize_in_place(self) -> 'Quaternion':
        """Scale to unit length in place; zero length gives NaN components."""
        self._q *= self._q.dtype.type(1) / self.length()
        return self

    @_ieee_silent
    def add_in_place(self, other: 'Quaternion') -> 'Quaternion':
        self._q += other._q
        return self

    @_ieee_silent
    def sub_in_place(self, other: 'Quaternion') -> 'Quaternion':
        self._q -= other._q
        return self

    def mul_in_place(self, other: 'Quaternion') -> 'Quaternion':
        self._q[:] = _hamilton(self._q, other._q)
        return self

    # =========================================================================
    # CONVERSION / UTILITY
    # =========================================================================

    def astype(self, dtype) -> 'Quaternion':
        """Return a copy converted to another precision."""
        return Quaternion._wrap(self._q.astype(resolve_dtype(dtype)))

    def copy(self) -> 'Quaternion':
        """Return an independent copy of this quaternion."""
        return Quaternion._wrap(self._q.copy())

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    @_ieee_silent
    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise addition."""
        if isinstance(other, Quaternion):
            return Quaternion._wrap(self._q + other._q)
        return NotImplemented

    @_ieee_silent
    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise subtraction."""
        if isinstance(other, Quaternion):
            return Quaternion._wrap(self._q - other._q)
        return NotImplemented

    def __mul__(self, other: Union['Quaternion', Scalar]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar -> component-wise scaling
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        elif isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other: Scalar) -> 'Quaternion':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, numbers.Real):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other: 'Quaternion') -> 'Quaternion':
        """Right division by another quaternion, see divide()."""
        if isinstance(other, Quaternion):
            return self.divide(other)
        return NotImplemented

    def __iadd__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.add_in_place(other)
        return NotImplemented

    def __isub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.sub_in_place(other)
        return NotImplemented

    def __imul__(self, other: Union['Quaternion', Scalar]) -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.mul_in_place(other)
        elif isinstance(other, numbers.Real):
            return self.scale_in_place(other)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        return self.negate()

    def __abs__(self) -> np.floating:
        return self.length()

    def __eq__(self, other: object) -> bool:
        """Tolerance-based equality, see approx_eq()."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.approx_eq(other)

    # Mutable and compared with a tolerance: not usable as a dict key
    __hash__ = None

    def __iter__(self) -> Iterator[float]:
        return iter((self.w, self.x, self.y, self.z))

    def __repr__(self) -> str:
        """
        Unambiguous string representation for debugging.

        Format: Quaternion(w=..., x=..., y=..., z=..., dtype=...)
        """
        return (f"Quaternion(w={self.w!r}, x={self.x!r}, y={self.y!r}, "
                f"z={self.z!r}, dtype={self.dtype.name})")


@_ieee_silent
def _hamilton(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product of two [w, x, y, z] arrays in their promoted precision."""
    dtype = np.result_type(a, b)
    w1, x1, y1, z1 = a.astype(dtype, copy=False)
    w2, x2, y2, z2 = b.astype(dtype, copy=False)

    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ], dtype=dtype)
