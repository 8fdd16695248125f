#!/usr/bin/env python3
"""
E10 vs E20 Engine Performance Comparison

This script runs the ethanol blend engine performance simulation with the
default configuration (or the flags given) and exports the comparison graphs
as E10_E20_PerformanceGraphs.png and .pdf.
"""

import sys

from ethanol_blend_sim.cli import main

if __name__ == "__main__":
    sys.exit(main())
