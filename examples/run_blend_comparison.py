#!/usr/bin/env python3
"""
Blend Comparison Example

Runs the E10/E20 comparison from Python with a wider RPM sweep and a higher
noise level, then writes the graphs and data to data/output/blend_comparison.
"""

import os
import sys

# Add project root to Python path for imports
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import matplotlib
matplotlib.use("Agg")

from ethanol_blend_sim import BlendSimulator, SimulationConfig


def main():
    config = SimulationConfig(
        rpm_start=1500,
        rpm_stop=6000,
        rpm_step=250,
        noise_fraction=0.03,
        seed=42,
        output_dir=os.path.join('data', 'output', 'blend_comparison')
    )

    simulator = BlendSimulator(config)
    clean = simulator.run(add_noise=False)
    print("Clean model output:")
    print(clean.comparison.to_dataframe().round(2).to_string())

    outcome = simulator.run_and_export()
    print("\nWith measurement noise:")
    print(outcome['result'].comparison.to_dataframe().round(2).to_string())

    print("\nFiles written:")
    for path in outcome['files']:
        print(f"  {path}")


if __name__ == "__main__":
    main()
