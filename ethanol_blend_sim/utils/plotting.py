"""
Plotting utilities for the ethanol blend engine performance simulation.

This module renders the blend comparison figure (brake power, torque, BSFC and
thermal efficiency against engine speed, one line per blend) and exports it
to raster and vector formats. It only reads the series it is given.
"""

import logging
import os
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .constants import (
    DEFAULT_EXPORT_BASENAME, DEFAULT_EXPORT_FORMATS, bsfc_to_g_per_kwh,
    efficiency_to_percent
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Plotting")


# Default style settings for plots
DEFAULT_FIG_SIZE = (10, 8)
DEFAULT_DPI = 300
DEFAULT_LINE_WIDTH = 1.5
DEFAULT_MARKER_SIZE = 6
DEFAULT_FONT_SIZE = 10
DEFAULT_TITLE_SIZE = 12
DEFAULT_LABEL_SIZE = 10
DEFAULT_LEGEND_SIZE = 10
DEFAULT_GRID_ALPHA = 0.3
DEFAULT_SAVE_FORMAT = 'png'

# Line style per blend: (color, marker)
BLEND_STYLES = {
    'E10': ('r', 'o'),
    'E20': ('b', 's'),
}
FALLBACK_STYLES = [('g', '^'), ('m', 'D'), ('k', 'v')]

# Subplot layout: (quantity, display scale, y label, title)
COMPARISON_PANELS = [
    ('brake_power', None, 'Brake Power (kW)', 'Brake Power vs RPM'),
    ('torque', None, 'Torque (Nm)', 'Torque vs RPM'),
    ('bsfc', bsfc_to_g_per_kwh, 'BSFC (g/kWh)', 'BSFC vs RPM'),
    ('thermal_efficiency', efficiency_to_percent, 'Thermal Efficiency (%)', 'Thermal Efficiency vs RPM'),
]


#------------------------------------------------------------------------------
# Utility functions
#------------------------------------------------------------------------------

def set_plot_style(style: str = 'default') -> None:
    """
    Set global matplotlib style for consistent plots.

    Args:
        style: Style name ('default' or 'clean')
    """
    if style == 'default':
        plt.style.use('default')
    elif style == 'clean':
        plt.style.use('seaborn-v0_8-whitegrid')
    else:
        logger.warning(f"Unknown style: {style}. Using default.")
        plt.style.use('default')

    # Set common parameters
    plt.rcParams['font.size'] = DEFAULT_FONT_SIZE
    plt.rcParams['axes.titlesize'] = DEFAULT_TITLE_SIZE
    plt.rcParams['axes.labelsize'] = DEFAULT_LABEL_SIZE
    plt.rcParams['legend.fontsize'] = DEFAULT_LEGEND_SIZE
    plt.rcParams['lines.linewidth'] = DEFAULT_LINE_WIDTH
    plt.rcParams['lines.markersize'] = DEFAULT_MARKER_SIZE
    plt.rcParams['grid.alpha'] = DEFAULT_GRID_ALPHA


def save_plot(fig: plt.Figure, filename: str, directory: Optional[str] = None,
              format: str = DEFAULT_SAVE_FORMAT, dpi: int = DEFAULT_DPI) -> str:
    """
    Save a plot to file with proper directory handling.

    Args:
        fig: Matplotlib figure to save
        filename: Base filename (without extension)
        directory: Directory to save in (created if doesn't exist)
        format: File format ('png', 'pdf', 'svg', etc.)
        dpi: Resolution for raster formats

    Returns:
        Full path to saved file
    """
    # Process filename
    base, ext = os.path.splitext(filename)
    if ext:
        if ext[1:].lower() != format.lower():
            logger.warning(f"Filename extension ({ext}) doesn't match format ({format}). Using {format}.")
        filename = base

    # Ensure directory exists
    if directory:
        os.makedirs(directory, exist_ok=True)
        filepath = os.path.join(directory, f"{filename}.{format}")
    else:
        filepath = f"{filename}.{format}"

    # Save the figure
    fig.savefig(filepath, format=format, dpi=dpi, bbox_inches='tight')
    logger.info(f"Plot saved to {filepath}")

    return filepath


def _blend_style(name: str, index: int):
    if name in BLEND_STYLES:
        return BLEND_STYLES[name]
    return FALLBACK_STYLES[index % len(FALLBACK_STYLES)]


#------------------------------------------------------------------------------
# Blend comparison plots
#------------------------------------------------------------------------------

def plot_blend_comparison(rpm: Sequence[float], series_by_fuel: Dict, title: Optional[str] = None,
                          save_path: Optional[str] = None) -> plt.Figure:
    """
    Plot the 2x2 blend comparison: brake power, torque, BSFC and thermal efficiency.

    BSFC is shown in g/kWh and thermal efficiency in percent.

    Args:
        rpm: Engine speeds (rpm), shared by all series
        series_by_fuel: PerformanceSeries keyed by blend name
        title: Optional figure title
        save_path: Path to save plot (if None, not saved)

    Returns:
        Matplotlib figure
    """
    rpm = np.asarray(rpm, dtype=float)
    for name, series in series_by_fuel.items():
        if len(series) != len(rpm):
            raise ValueError(f"Series {name} has {len(series)} points, expected {len(rpm)}")

    fig, axes = plt.subplots(2, 2, figsize=DEFAULT_FIG_SIZE)

    for ax, (quantity, scale, ylabel, panel_title) in zip(axes.flat, COMPARISON_PANELS):
        for i, (name, series) in enumerate(series_by_fuel.items()):
            values = getattr(series, quantity)
            if scale is not None:
                values = scale(values)
            color, marker = _blend_style(name, i)
            ax.plot(rpm, values, color=color, marker=marker, linestyle='-',
                    linewidth=DEFAULT_LINE_WIDTH, label=name)

        ax.set_xlabel('RPM')
        ax.set_ylabel(ylabel)
        ax.set_title(panel_title)
        ax.legend(loc='best')
        ax.grid(True, alpha=DEFAULT_GRID_ALPHA)

    if title:
        fig.suptitle(title)

    # Adjust layout
    fig.tight_layout()

    if save_path:
        save_plot(fig, save_path)

    return fig


class ReportExporter:
    """Renders the blend comparison figure and writes it to image and document files."""

    def __init__(self, output_dir: str = '.', basename: str = DEFAULT_EXPORT_BASENAME,
                 formats: Optional[Sequence[str]] = None, dpi: int = DEFAULT_DPI,
                 style: Optional[str] = None):
        """
        Initialize the exporter.

        Args:
            output_dir: Directory files are written to
            basename: Base filename shared by all formats
            formats: File formats to write (default png and pdf)
            dpi: Resolution for raster formats
            style: Optional plot style applied before rendering
        """
        self.output_dir = output_dir
        self.basename = basename
        self.formats = list(formats) if formats else list(DEFAULT_EXPORT_FORMATS)
        self.dpi = dpi
        self.style = style

    def export(self, rpm: Sequence[float], series_by_fuel: Dict,
               title: Optional[str] = None) -> List[str]:
        """
        Render the comparison figure and write one file per format.

        Args:
            rpm: Engine speeds (rpm)
            series_by_fuel: PerformanceSeries keyed by blend name
            title: Optional figure title

        Returns:
            Paths of the written files, in format order
        """
        if self.style:
            set_plot_style(self.style)

        fig = plot_blend_comparison(rpm, series_by_fuel, title=title)
        try:
            return [save_plot(fig, self.basename, self.output_dir, format=fmt, dpi=self.dpi)
                    for fmt in self.formats]
        finally:
            plt.close(fig)
