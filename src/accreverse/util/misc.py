def clamp(value, lower, upper):
    """
    Clamp value to the closed range [lower, upper]
    """
    return min(upper, max(value, lower))


def lerp(interpolant, lower, upper):
    """
    Linear interpolation between lower and upper. The interpolant is clamped
    to [0, 1] so the result never leaves the range.
    Args:
        interpolant (float):
            Blend factor, 0 returns lower and 1 returns upper
        lower (float):
            Value at interpolant 0
        upper (float):
            Value at interpolant 1
    Returns:
        float: The interpolated value
    """
    t = clamp(interpolant, 0.0, 1.0)
    return lower + t * (upper - lower)


def inverse_lerp(value, lower, upper):
    """
    Interpolant that reproduces value when passed to lerp(lower, upper),
    clamped to [0, 1] outside the range
    """
    if value <= lower:
        return 0.0
    if value >= upper:
        return 1.0
    return (value - lower) / (upper - lower)


_TENS = ["", "X", "XX", "XXX", "XL", "L", "LX", "LXX", "LXXX", "XC"]
_ONES = ["", "I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX"]


def roman_numeral(value):
    """
    Roman numeral for an ordinal in [1, 99], used for planet names
    """
    if value < 1 or value > 99:
        raise ValueError(f"Ordinal must be in [1, 99], got {value}")
    return _TENS[(value // 10) % 10] + _ONES[value % 10]
