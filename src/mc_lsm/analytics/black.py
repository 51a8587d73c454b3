"""
Black and Black-Scholes closed forms for European options.

Used as the known value of the European control variate and as a reference
in tests and demos. No scipy dependency.
"""

import math


def norm_cdf(x: float) -> float:
    """
    Cumulative distribution function for standard normal distribution.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        CDF value at x: P(Z <= x) where Z ~ N(0,1)
    """
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))


def black_formula(
    option_type: str,
    strike: float,
    forward: float,
    std_dev: float,
    discount: float = 1.0
) -> float:
    """
    Black formula for a European option on a forward.

    Parameters
    ----------
    option_type : str
        'call' or 'put'
    strike : float
        Strike price (must be >= 0)
    forward : float
        Forward price of the underlying at expiry (must be > 0)
    std_dev : float
        Standard deviation of the log forward, sigma * sqrt(T) (must be >= 0)
    discount : float, optional
        Discount factor to expiry (default: 1.0)

    Returns
    -------
    float
        Discounted option value

    Examples
    --------
    >>> round(black_formula("call", 100.0, 100.0, 0.2, 1.0), 4)
    7.9656
    """
    if option_type not in ["call", "put"]:
        raise ValueError("option_type must be 'call' or 'put'")
    if strike < 0:
        raise ValueError(f"strike ({strike}) must be non-negative")
    if forward <= 0:
        raise ValueError(f"forward ({forward}) must be positive")
    if std_dev < 0:
        raise ValueError(f"stdDev ({std_dev}) must be non-negative")
    if discount <= 0:
        raise ValueError(f"discount ({discount}) must be positive")

    sign = 1.0 if option_type == "call" else -1.0

    if std_dev == 0.0 or strike == 0.0:
        return max(sign * (forward - strike), 0.0) * discount

    d1 = math.log(forward / strike) / std_dev + 0.5 * std_dev
    d2 = d1 - std_dev
    value = sign * (forward * norm_cdf(sign * d1) - strike * norm_cdf(sign * d2))
    return discount * max(value, 0.0)


def bs_price(S0: float, K: float, r: float, T: float, sigma: float, option_type: str,
             q: float = 0.0) -> float:
    """
    Compute European option price using Black-Scholes formula.

    Parameters
    ----------
    S0 : float
        Initial spot price (must be > 0)
    K : float
        Strike price (must be > 0)
    r : float
        Risk-free interest rate (annualized)
    T : float
        Time to maturity in years (must be >= 0)
    sigma : float
        Volatility (annualized, must be >= 0)
    option_type : str
        'call' or 'put'
    q : float, optional
        Continuous dividend yield (default: 0)

    Returns
    -------
    float
        Option price
    """
    if S0 <= 0:
        raise ValueError("Spot price S0 must be positive")
    if K <= 0:
        raise ValueError("Strike K must be positive")
    if T < 0:
        raise ValueError("Time to maturity T must be non-negative")
    if sigma < 0:
        raise ValueError("Volatility sigma must be non-negative")

    forward = S0 * math.exp((r - q) * T)
    return black_formula(option_type, K, forward, sigma * math.sqrt(T), math.exp(-r * T))
