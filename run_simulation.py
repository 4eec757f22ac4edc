"""
Run the hotel demand simulation with both booking strategies.

Simulates 90 days of demand for a five-category hotel, once with exact
room-type matching and once with upgrade fallback, and compares the outcomes.
"""

import logging
import os

from core.reservation import StrategyType
from core.simulator import HotelSimulation, SimulationConfig
from demand.generator import DemandConfig

logger = logging.getLogger("run_simulation")


def create_demand():
    # Cheap rooms are requested most often
    return DemandConfig(
        room_type_weights={
            "Single": 0.35,
            "Double": 0.30,
            "DoubleWithSofa": 0.15,
            "HalfLux": 0.12,
            "Lux": 0.08
        }
    )


def run_strategy(strategy: StrategyType, output_dir: str):
    config = SimulationConfig(
        strategy=strategy,
        demand=create_demand(),
        duration_days=90,
        step_hours=1,
        random_seed=42,
        export_csv=True,
        output_dir=output_dir
    )
    simulation = HotelSimulation(config)
    return simulation.run()


def main():
    print("="*50)
    print("Running 90-Day Hotel Demand Simulation")
    print("="*50)

    results = {}
    for strategy in StrategyType:
        output_dir = f"simulation_results/{strategy.value}"
        os.makedirs(output_dir, exist_ok=True)
        results[strategy] = run_strategy(strategy, output_dir)

    print("\nStrategy comparison")
    print("-"*50)
    for strategy, result in results.items():
        print(f"{strategy.value:>8}: accepted {result.accepted_bookings}/{result.total_bookings} "
              f"({result.acceptance_rate:.1%}), occupancy {result.weighted_mean_occupancy:.1%}, "
              f"revenue {result.total_revenue:,}")


if __name__ == "__main__":
    main()
