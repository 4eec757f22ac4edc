"""Plot exported daily occupancy and report acceptance by requested room type."""

import sys
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path


def analyze_occupancy(results_dir: str = 'simulation_results/smart'):
    print("Analyzing occupancy from simulation results...")

    results_path = Path(results_dir)
    try:
        df = pd.read_csv(results_path / 'occupancy.csv', index_col='day')
    except FileNotFoundError:
        print(f"Error: {results_path / 'occupancy.csv'} not found.")
        return

    # Plot
    fig, ax = plt.subplots(figsize=(15, 8))
    for room_type in df.columns:
        # 7-day rolling average to smooth daily noise
        ax.plot(df.index, df[room_type].rolling(window=7, min_periods=1).mean(), label=room_type)

    ax.set_title('Daily Occupancy by Room Type (7-Day Moving Avg)')
    ax.set_xlabel('Day')
    ax.set_ylabel('Busy Fraction')
    ax.set_ylim(0, 1.05)
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()
    output = results_path / 'occupancy_analysis.png'
    fig.savefig(output)
    print(f"Plot saved to {output}")

    # Acceptance by requested room type
    try:
        bookings = pd.read_csv(results_path / 'bookings.csv')
    except FileNotFoundError:
        return

    by_type = bookings.groupby('requested_type')['accepted'].agg(['count', 'mean'])
    by_type.columns = ['requests', 'acceptance_rate']
    print("\nAcceptance by requested room type:")
    print(by_type.to_string())

    print("\nMean occupancy:")
    print(df.mean().to_string(float_format=lambda x: f"{x:.1%}"))


if __name__ == "__main__":
    analyze_occupancy(*sys.argv[1:2])
