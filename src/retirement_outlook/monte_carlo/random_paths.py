"""
Random path generation for investment returns and inflation.

Returns are log-normal in the growth factor (1 + r), which keeps every draw
above -100%. Inflation is normal. Draws are independent across trials and
years; each generator owns its own numpy stream.
"""

from typing import List, Tuple, Union

import numpy as np

SeedLike = Union[None, int, np.random.SeedSequence]


def lognormal_params_from_arithmetic(mean: float, stdev: float) -> Tuple[float, float]:
    """
    Compute (mu, sigma) of a log-normal factor X = 1 + r given E[r] = mean and SD[r] = stdev.

    For X ~ logN(mu, sigma^2): E[X] = exp(mu + sigma^2/2),
    Var[X] = (exp(sigma^2) - 1) exp(2mu + sigma^2).
    """
    a = 1.0 + mean
    sigma2 = np.log1p((stdev * stdev) / (a * a))
    sigma = float(np.sqrt(max(0.0, sigma2)))
    mu = float(np.log(a) - 0.5 * sigma2)
    return mu, sigma


class RandomPathGenerator:
    """Per-(year, trial) draws from one independent random stream."""

    def __init__(self, seed: SeedLike = None):
        if isinstance(seed, np.random.SeedSequence):
            self.seed_seq = seed
        else:
            self.seed_seq = np.random.SeedSequence(seed)  # None -> OS entropy
        self.rng = np.random.default_rng(self.seed_seq)

    def spawn(self, n: int) -> List["RandomPathGenerator"]:
        """Independent child generators, one per concurrent chunk of trials."""
        return [RandomPathGenerator(child) for child in self.seed_seq.spawn(n)]

    def draw_returns(self, n_years: int, n_sims: int, mean: float, vol: float) -> np.ndarray:
        """
        Arithmetic annual returns, shape (n_years, n_sims), always > -1.

        With vol == 0 every entry equals `mean` up to floating point.
        """
        mu, sigma = lognormal_params_from_arithmetic(mean, vol)
        z = self.rng.standard_normal(size=(n_years, n_sims))
        return np.expm1(mu + sigma * z)

    def draw_inflation(self, n_years: int, n_sims: int, mean: float, vol: float) -> np.ndarray:
        """Annual inflation rates, shape (n_years, n_sims), normally distributed."""
        z = self.rng.standard_normal(size=(n_years, n_sims))
        return mean + vol * z
