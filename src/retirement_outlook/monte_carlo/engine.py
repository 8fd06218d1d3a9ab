"""
Core Monte Carlo simulation engine for retirement planning.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..config import CHUNK_SIZE, MAX_WORKERS, USE_PARALLEL_PROCESSING
from ..models import SimulationParameters
from ..validation import check_parameters
from .random_paths import RandomPathGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawTrialData:
    """Per-age, per-trial samples of one simulation call."""
    ages: np.ndarray      # (n_ages,)
    assets: np.ndarray    # (n_ages, n_trials), end-of-year assets
    spending: np.ndarray  # (n_ages, n_trials), monthly-equivalent spending
    failed: np.ndarray    # (n_trials,), True once assets were exhausted

    @property
    def trials(self) -> int:
        return int(self.failed.shape[0])

    def trial_path(self, trial: int) -> List[Tuple[int, float, float]]:
        """(age, assets, spending) samples of a single trial."""
        return [
            (int(age), float(a), float(s))
            for age, a, s in zip(self.ages, self.assets[:, trial], self.spending[:, trial])
        ]


class Engine:
    """Monte Carlo simulation engine for accumulation and decumulation phases."""

    def __init__(
        self,
        params: SimulationParameters,
        parallel: Optional[bool] = None,
        chunk_size: Optional[int] = None,
    ):
        """
        Initialize the Monte Carlo engine.

        Args:
            params: Validated household parameters
            parallel: Run trial chunks in a thread pool (defaults to USE_PARALLEL_PROCESSING)
            chunk_size: Trials per independent random stream (defaults to CHUNK_SIZE)
        """
        self.params = check_parameters(params)
        self.horizon = params.end_age - params.current_age
        self.parallel = USE_PARALLEL_PROCESSING if parallel is None else parallel
        self.chunk_size = max(1, chunk_size or CHUNK_SIZE)
        self._lumps_by_age = self._build_lumps()

    def _build_lumps(self) -> Dict[int, float]:
        lumps: Dict[int, float] = {}
        for income in self.params.one_time_incomes:
            lumps.setdefault(income.age, 0.0)
            lumps[income.age] += income.amount
        return lumps

    def _chunk_sizes(self) -> List[int]:
        n = self.params.simulation_runs
        full, rest = divmod(n, self.chunk_size)
        sizes = [self.chunk_size] * full
        if rest:
            sizes.append(rest)
        return sizes

    def _simulate_chunk(
        self, gen: RandomPathGenerator, n_sims: int
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Simulate `n_sims` trials with one random stream."""
        p = self.params
        nY = self.horizon + 1
        tax = p.tax_fraction
        retire_age = p.effective_retirement_age

        rets = gen.draw_returns(nY, n_sims, p.average_roi, p.roi_volatility)
        infl = gen.draw_inflation(nY, n_sims, p.average_inflation, p.inflation_volatility)

        assets = np.full(n_sims, float(p.current_assets))
        basis = assets.copy()  # original investment, for the gains share of withdrawals
        monthly = np.full(n_sims, p.total_monthly_expenses)
        annual = np.full(n_sims, p.total_annual_expenses)
        failed = np.zeros(n_sims, dtype=bool)

        asset_hist = np.zeros((nY, n_sims))
        spend_hist = np.zeros((nY, n_sims))

        for yi in range(nY):
            age = p.current_age + yi
            growth = 1.0 + rets[yi]

            # One-time incomes arrive at the start of the year
            lump = self._lumps_by_age.get(age, 0.0)
            if lump:
                assets = np.where(failed, assets, assets + lump)
                basis = np.where(failed, basis, basis + lump)

            if age < retire_age:
                # Accumulation: grow, then credit this year's savings
                assets = assets * growth + p.annual_savings
                basis = basis + p.annual_savings
            else:
                expense = monthly * 12.0 + annual
                income = p.annual_pension if age >= p.legal_retirement_age else 0.0
                need = expense - income

                alive = ~failed
                assets = np.where(alive, np.maximum(assets * growth, 0.0), 0.0)

                # Gross up the withdrawal so that tax on its gains share still leaves `need`
                basis_ratio = np.divide(basis, assets, out=np.ones_like(assets), where=assets > 0)
                gains_ratio = 1.0 - np.clip(basis_ratio, 0.0, 1.0)
                gross = np.where(need > 0, need / (1.0 - tax * gains_ratio), 0.0)
                withdrawal = np.minimum(gross, assets)
                wd_ratio = np.divide(withdrawal, assets, out=np.zeros_like(assets), where=assets > 0)

                withdrawing = alive & (need > 0)
                basis = np.where(withdrawing, np.maximum(basis * (1.0 - wd_ratio), 0.0), basis)
                assets = np.where(withdrawing, np.maximum(assets - withdrawal, 0.0), assets)
                failed = failed | (withdrawing & (assets <= 0.0))

                # Surplus income is reinvested
                surplus = alive & ~failed & (need <= 0)
                assets = np.where(surplus, assets - need, assets)
                basis = np.where(surplus, basis - need, basis)

                assets = np.where(failed, 0.0, assets)
                spend_hist[yi] = monthly + annual / 12.0

            asset_hist[yi] = assets

            # Inflate expenses for next year
            factor = 1.0 + infl[yi]
            monthly = monthly * factor
            annual = annual * factor

        return asset_hist, spend_hist, failed

    def run(self, seed: Optional[int] = None) -> RawTrialData:
        """
        Run all trials.

        Args:
            seed: Overrides params.seed; None on both means fresh OS entropy

        Returns:
            RawTrialData with one sample per age from current_age to end_age
        """
        p = self.params
        sizes = self._chunk_sizes()
        root = RandomPathGenerator(p.seed if seed is None else seed)
        gens = root.spawn(len(sizes))

        logger.info(
            "Simulating %d trials for ages %d-%d (retire %d, pension %d)",
            p.simulation_runs, p.current_age, p.end_age, p.retirement_age, p.legal_retirement_age,
        )
        logger.debug("Using %d chunk(s), parallel=%s", len(sizes), self.parallel)

        if self.parallel and len(sizes) > 1:
            with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
                chunks = list(pool.map(self._simulate_chunk, gens, sizes))
        else:
            chunks = [self._simulate_chunk(g, n) for g, n in zip(gens, sizes)]

        return RawTrialData(
            ages=np.arange(p.current_age, p.end_age + 1),
            assets=np.concatenate([c[0] for c in chunks], axis=1),
            spending=np.concatenate([c[1] for c in chunks], axis=1),
            failed=np.concatenate([c[2] for c in chunks]),
        )


def simulate(params: SimulationParameters, **kwargs) -> RawTrialData:
    """Validate `params` and run every trial."""
    return Engine(params, **kwargs).run()
