#!/usr/bin/env python3
"""Scan search granularities for the bounds of a single server.

Coarser granularities finish in fewer iterations but may stop further from
the best theta; this prints both side by side.
"""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from snc_calculator.optimization.optimizable import BoundType
from snc_calculator.optimization.simple_gradient import SimpleGradient, build_single_server
from snc_calculator.reporting.bound_report import format_results

ARRIVAL_RATE = 2.0
SERVICE_RATE = 1.0
EPSILON = 1e-6

print(f'Scanning granularities (arrival rate={ARRIVAL_RATE}, service rate={SERVICE_RATE}, eps={EPSILON:g})')
print()

rows = []
for dependent in (False, True):
    arrival = build_single_server(ARRIVAL_RATE, SERVICE_RATE, dependent=dependent)
    for granularity in (0.1, 0.05, 0.01, 0.005):
        optimizer = SimpleGradient()
        for boundtype in (BoundType.BACKLOG, BoundType.DELAY):
            optimizer.reverse_bound(arrival, boundtype, EPSILON, granularity, granularity)
            label = f"{boundtype.value:<7s} g={granularity:<6g} {'dep' if dependent else 'indep'}"
            rows.append((label, optimizer.last_result))

print(format_results(rows))
