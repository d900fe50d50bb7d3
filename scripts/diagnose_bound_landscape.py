"""
Diagnostic script to visualize the reverse backlog bound as a function of theta.
Shows where the discrete search stops relative to the true minimum of the curve.
"""

import math
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from snc_calculator.optimization.optimizable import BoundType
from snc_calculator.optimization.simple_gradient import SimpleGradient, build_single_server
from snc_calculator.symbolic_math.exceptions import ServerOverloadError, ThetaOutOfBoundError

ARRIVAL_RATE = 2.0
SERVICE_RATE = 1.0
EPSILON = 1e-6

print("=" * 80)
print("BOUND LANDSCAPE DIAGNOSTIC")
print("=" * 80)
print(f"Exponential arrivals (rate={ARRIVAL_RATE}), constant service (rate={SERVICE_RATE}), eps={EPSILON:g}")
print()

arrival = build_single_server(ARRIVAL_RATE, SERVICE_RATE)
arrival.prepare()
theta_star = arrival.theta_star
theta_values = np.linspace(theta_star / 200, theta_star * 0.995, 400)


def reverse_backlog(theta):
    try:
        probability = arrival.evaluate(theta, 0, 0.0)
    except (ServerOverloadError, ThetaOutOfBoundError):
        return np.nan
    return (math.log(probability) - math.log(EPSILON)) / theta


backlog_values = np.array([reverse_backlog(t) for t in theta_values])

granularities = [0.1, 0.05, 0.01]
fig, ax = plt.subplots(figsize=(10, 6))
ax.plot(theta_values, backlog_values, 'b-', linewidth=2, label='reverse backlog bound')

for granularity in granularities:
    optimizer = SimpleGradient()
    value = optimizer.reverse_bound(arrival, BoundType.BACKLOG, EPSILON, granularity, granularity)
    result = optimizer.last_result
    print(f"  granularity={granularity:<6g} theta={result.theta:.4f} backlog={value:.4f} "
          f"({result.iterations} iterations)")
    ax.plot(result.theta, value, 'o', markersize=8, label=f'search, g={granularity:g}')

valid = np.isfinite(backlog_values)
if np.any(valid):
    best = np.nanargmin(backlog_values)
    print(f"  grid minimum: theta={theta_values[best]:.4f} backlog={backlog_values[best]:.4f}")

ax.set_xlabel('theta', fontsize=10)
ax.set_ylabel('backlog bound', fontsize=10)
ax.set_title(f'Reverse backlog bound vs theta (eps={EPSILON:g})', fontsize=11, fontweight='bold')
ax.set_ylim(0, np.nanpercentile(backlog_values, 90))
ax.legend(fontsize=9)
ax.grid(True, alpha=0.3)

plt.tight_layout()
output_path = 'bound_landscape_diagnostic.png'
plt.savefig(output_path, dpi=150, bbox_inches='tight')
print(f"Plot saved to: {output_path}")
