"""
Test the year-by-year simulation engine.
Deterministic scenarios pin the accumulation, withdrawal and tax math exactly.
"""

import numpy as np
import pytest

from retirement_outlook.errors import InvalidParameterError
from retirement_outlook.models import OneTimeIncome, SimulationParameters
from retirement_outlook.monte_carlo import Engine, aggregate, simulate


def _params(base, **overrides):
    data = dict(base)
    data.update(overrides)
    return SimulationParameters(**data)


class TestShape:
    """Test the layout of raw trial data."""

    def test_one_sample_per_age(self, default_profile):
        params = _params(default_profile, simulation_runs=25, seed=1)
        raw = simulate(params)

        n_ages = params.end_age - params.current_age + 1
        assert raw.assets.shape == (n_ages, 25)
        assert raw.spending.shape == (n_ages, 25)
        assert raw.failed.shape == (25,)
        assert list(raw.ages) == list(range(54, 91))

    def test_trial_path(self, default_profile):
        raw = simulate(_params(default_profile, simulation_runs=3, seed=1))
        path = raw.trial_path(2)

        assert [age for age, _, _ in path] == list(range(54, 91))
        assert path[0][1] == pytest.approx(raw.assets[0, 2])

    def test_assets_never_negative(self, default_profile):
        raw = simulate(_params(default_profile, roi_volatility=0.25, simulation_runs=300, seed=4))

        assert np.min(raw.assets) >= 0.0


class TestDeterministicPaths:
    """Test zero-volatility scenarios that have closed-form answers."""

    def test_zero_volatility_trials_identical(self, deterministic_profile):
        raw = simulate(SimulationParameters(**deterministic_profile))

        assert np.all(raw.assets == raw.assets[:, [0]]), "Trials diverged without randomness"
        assert np.all(raw.spending == raw.spending[:, [0]])

    def test_accumulation_growth_then_savings(self, flat_market):
        params = _params(
            flat_market,
            current_age=50, retirement_age=52, legal_retirement_age=67, end_age=51,
            current_assets=1_000, annual_savings=1_000, average_roi=0.10,
        )
        raw = simulate(params)

        # savings are credited after growth and do not earn this year's return
        assert raw.assets[0, 0] == pytest.approx(1_000 * 1.1 + 1_000)
        assert raw.assets[1, 0] == pytest.approx(2_100 * 1.1 + 1_000)
        assert np.all(raw.spending == 0.0)

    def test_withdrawal_grossed_up_for_gains_tax(self, flat_market):
        params = _params(
            flat_market,
            current_age=60, retirement_age=60, legal_retirement_age=90, end_age=60,
            current_assets=1_000, average_roi=0.10, capital_gains_tax=25,
            monthly_expenses={"health": 100 / 12},
        )
        raw = simulate(params)

        # After growth: 1100, of which 100 is gain; tax only applies to the gain share
        denom = 1 - 0.25 * (1 - 1_000 / 1_100)
        expected = 1_100 - 100 / denom
        assert raw.assets[0, 0] == pytest.approx(expected, rel=1e-9)

    def test_surplus_income_reinvested(self, flat_market):
        params = _params(
            flat_market,
            current_age=60, retirement_age=60, legal_retirement_age=60, end_age=60,
            current_assets=1_000, monthly_pension=1_000,
        )
        raw = simulate(params)

        assert raw.assets[0, 0] == pytest.approx(1_000 + 12_000)
        assert not raw.failed[0]

    def test_inflation_compounds_expenses(self, flat_market):
        params = _params(
            flat_market,
            current_age=60, retirement_age=60, legal_retirement_age=90, end_age=62,
            current_assets=1_000_000, average_inflation=0.02,
            monthly_expenses={"living": 1_000}, annual_expenses={"travel": 1_200},
        )
        raw = simulate(params)

        monthly_equivalent = 1_000 + 1_200 / 12
        expected = [monthly_equivalent * 1.02 ** k for k in range(3)]
        np.testing.assert_allclose(raw.spending[:, 0], expected, rtol=1e-12)

    def test_custom_expenses_folded_in(self, flat_market):
        params = _params(
            flat_market,
            current_age=60, retirement_age=60, legal_retirement_age=90, end_age=60,
            current_assets=100_000,
            custom_expenses=[
                {"name": "Garden", "amount": 100, "interval": "monthly"},
                {"name": "Insurance", "amount": 1_200, "interval": "annual"},
            ],
        )
        raw = simulate(params)

        assert raw.spending[0, 0] == pytest.approx(100 + 1_200 / 12)
        assert raw.assets[0, 0] == pytest.approx(100_000 - 2_400)

    def test_one_time_income_credited(self, flat_market):
        params = _params(
            flat_market,
            current_age=60, retirement_age=60, legal_retirement_age=90, end_age=61,
            current_assets=0, one_time_incomes=[OneTimeIncome(age=61, amount=5_000)],
        )
        raw = simulate(params)

        assert raw.assets[0, 0] == 0.0
        assert raw.assets[1, 0] == pytest.approx(5_000)
        assert not raw.failed[0], "A trial with no spending need cannot fail"


class TestFailure:
    """Test exhaustion and pinning semantics."""

    def test_failed_trial_pinned_at_zero(self, flat_market):
        params = _params(
            flat_market,
            current_age=60, retirement_age=60, legal_retirement_age=70, end_age=75,
            current_assets=100_000, monthly_pension=100_000,
            annual_expenses={"living": 50_000},
        )
        raw = simulate(params)
        series = aggregate(raw)

        assert raw.assets[0, 0] == pytest.approx(50_000)
        assert np.all(raw.assets[1:, 0] == 0.0), "Pension surplus revived a failed trial"
        assert raw.failed[0]
        assert series.success_rate == 0.0

    def test_pension_after_horizon_never_paid(self, default_profile):
        late = _params(default_profile, legal_retirement_age=95, simulation_runs=50, seed=21)
        no_pension = _params(default_profile, legal_retirement_age=95, monthly_pension=0,
                             simulation_runs=50, seed=21)

        np.testing.assert_array_equal(simulate(late).assets, simulate(no_pension).assets)

    def test_immediate_retirement(self, default_profile):
        raw = simulate(_params(default_profile, retirement_age=54, simulation_runs=20, seed=2))

        assert np.all(raw.spending[0] > 0), "No spending recorded in the first retirement year"


class TestReproducibility:
    """Test seeding and chunked execution."""

    def test_same_seed_same_result(self, default_profile):
        params = _params(default_profile, roi_volatility=0.15, simulation_runs=200, seed=77)

        np.testing.assert_array_equal(simulate(params).assets, simulate(params).assets)

    def test_run_seed_overrides_params(self, default_profile):
        params = _params(default_profile, roi_volatility=0.15, simulation_runs=100, seed=1)
        eng = Engine(params)

        assert not np.array_equal(eng.run(seed=2).assets, eng.run().assets)
        np.testing.assert_array_equal(eng.run(seed=2).assets, eng.run(seed=2).assets)

    def test_parallel_matches_serial(self, default_profile):
        params = _params(default_profile, roi_volatility=0.15, simulation_runs=350, seed=7)
        serial = Engine(params, parallel=False, chunk_size=100).run()
        parallel = Engine(params, parallel=True, chunk_size=100).run()

        np.testing.assert_array_equal(serial.assets, parallel.assets)
        np.testing.assert_array_equal(serial.failed, parallel.failed)
        assert serial.trials == 350


class TestInvalidParameters:
    """Test rejection of out-of-domain inputs before simulation."""

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"end_age": 50}, "end_age"),
            ({"retirement_age": 40}, "retirement_age"),
            ({"simulation_runs": 0}, "simulation_runs"),
            ({"simulation_runs": -5}, "simulation_runs"),
            ({"current_assets": -1}, "current_assets"),
            ({"annual_savings": -100}, "annual_savings"),
            ({"monthly_pension": -1}, "monthly_pension"),
            ({"roi_volatility": -0.1}, "roi_volatility"),
            ({"monthly_expenses": {"food": -10}}, "monthly_expenses.food"),
            ({"annual_expenses": {"vacations": -1}}, "annual_expenses.vacations"),
            ({"custom_expenses": [{"name": "gym", "amount": -5}]}, "custom_expenses.0.amount"),
            ({"one_time_incomes": [{"age": 60, "amount": -1000}]}, "one_time_incomes.0.amount"),
            ({"capital_gains_tax": -5}, "capital_gains_tax"),
        ],
    )
    def test_rejected_with_field(self, default_profile, overrides, field):
        params = _params(default_profile, **overrides)

        with pytest.raises(InvalidParameterError) as excinfo:
            Engine(params)
        assert excinfo.value.field == field

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"current_assets": float("nan")}, "current_assets"),
            ({"roi_volatility": float("inf")}, "roi_volatility"),
            ({"average_inflation": float("nan")}, "average_inflation"),
            ({"capital_gains_tax": 95.0}, "capital_gains_tax"),
            ({"annual_expenses": {"repairs": float("nan")}}, "annual_expenses.repairs"),
        ],
    )
    def test_unvalidated_values_rejected(self, default_profile, overrides, field):
        params = SimulationParameters.model_construct(**dict(default_profile, **overrides))

        with pytest.raises(InvalidParameterError) as excinfo:
            Engine(params)
        assert excinfo.value.field == field
