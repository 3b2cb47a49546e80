# physics_utils.py

import math

import numpy as np

class PhysicsError(Exception):
    """Base exception for errors raised by the orbit and body model."""
    pass

class RangeError(PhysicsError, ValueError):
    """Raised when a setter receives a value outside its domain.

    Covers eccentricity, semi-major axis, radius, offsets, rotational period,
    axis of rotation and icosphere recursion level. The rejected value is never
    stored.
    """
    pass

class MassClassificationError(PhysicsError, ValueError):
    """Raised when a mass contradicts the star/satellite classification of a body.

    A star must weigh at least the stellar mass threshold; a satellite must weigh
    more than zero and strictly less than it.
    """
    pass

def safe_divide(numerator, denominator, epsilon=1e-12, default_on_zero_denom=0.0):
    """
    Safely divides two numbers, handling potential division by zero.

    Args:
        numerator (float): The number to be divided.
        denominator (float): The number to divide by.
        epsilon (float): Threshold below which the denominator is considered zero.
        default_on_zero_denom (float): Value to return if denominator is effectively zero.
                                       If set to float('inf') or float('-inf'), the sign of
                                       the numerator decides the sign of the result.

    Returns:
        float: The result of the division, or default_on_zero_denom if denominator is near zero.
    """
    if abs(denominator) < epsilon:
        if default_on_zero_denom == float('inf') or default_on_zero_denom == float('-inf'):
            if abs(numerator) < epsilon: # 0/0 case
                return 0.0
            return float('inf') if numerator > 0 else float('-inf')
        return default_on_zero_denom
    return numerator / denominator

def normalize_vector(vector, epsilon=1e-12):
    """
    Normalizes a vector to unit length.

    Args:
        vector (np.ndarray): The vector to normalize.
        epsilon (float): Threshold below which the vector's magnitude is considered zero.

    Returns:
        np.ndarray: The normalized vector, or a zero vector of the same shape
                    if its magnitude is close to zero.
    """
    if not isinstance(vector, np.ndarray):
        vector = np.array(vector, dtype=float)

    norm = np.linalg.norm(vector)
    if norm < epsilon:
        return np.zeros_like(vector, dtype=float)
    return vector / norm

def angular_diameter(diameter, distance):
    """
    Apparent angular diameter of a sphere seen from a given distance.

    Args:
        diameter (float): Diameter of the observed sphere.
        distance (float): Distance from the observer to the sphere's center,
                          in the same unit as `diameter`.

    Returns:
        float: The angular diameter in degrees. 180.0 if the observer is inside the sphere.
    """
    ratio = safe_divide(diameter, 2.0 * distance, default_on_zero_denom=float('inf'))
    if ratio >= 1.0:
        return 180.0
    return math.degrees(2.0 * math.asin(ratio))
