"""
Reporting for bound searches.
"""

from snc_calculator.reporting.bound_report import format_results, format_hoelders

__all__ = ['format_results', 'format_hoelders']
