#!/usr/bin/env python3

"""
Point-reaching inverse kinematics, end to end.

Loads a URDF model, builds the distance between a point on the end-effector
and a target, prints a symbolic form of that distance, minimises it with a
local gradient-based solver and with the interval branch-and-bound solver,
and shows the local solution in a 3D plot.

Usage:
    $ python reach_target.py [--config panda_reach.yaml] [--log-level INFO]
"""

import argparse
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import sympy

from jax_ik import Point3D, evaluate
from jax_ik.config import load_config
from jax_ik.io import load_urdf
from jax_ik.optimize import solve_global, solve_local
from jax_ik.symbolic import symbolic_residual
from jax_ik.viz import plot_configuration

logger = logging.getLogger("reach_target")


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--config", default=str(Path(__file__).parent / "panda_reach.yaml"),
                        help="YAML scenario file")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    parser.add_argument("--no-plot", action="store_true", help="skip the 3D plot")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = load_config(args.config)
    robot = load_urdf(config.urdf_path)
    logger.info("Loaded %s: %d links, %d degrees of freedom",
                config.urdf_path, robot.num_links, robot.num_dof)

    point = Point3D.on_body(robot, config.end_effector, config.point_offset)
    target = Point3D.fixed(robot, config.target)
    residual = evaluate(robot, point, target)

    if config.symbolic:
        expression, _ = symbolic_residual(residual, robot.num_dof)
        logger.info("Symbolic residual has %d operations", sympy.count_ops(expression))
        print(expression)

    q0 = np.zeros(robot.num_dof)
    if config.initial_configuration is not None:
        q0 = np.asarray(config.initial_configuration, dtype=float)
    local = solve_local(residual, q0, method=config.local.method, gtol=config.local.gtol,
                        max_iterations=config.local.max_iterations)
    np.set_printoptions(precision=4)
    print(f"local:  q = {local.q}  residual = {local.residual:.3e}")

    if config.global_.enabled:
        bound = config.global_.bound
        result = solve_global(residual, [(-bound, bound)] * robot.num_dof,
                              tol=config.global_.tol, max_iterations=config.global_.max_iterations)
        print(f"global: minimum in [{result.lower:.3e}, {result.upper:.3e}] "
              f"({len(result.minimizers)} candidate boxes, converged={result.converged})")
        print(f"        local residual above lower bound: {result.lower <= local.residual}")
        print(f"        local solution inside a candidate box: {result.contains(local.q)}")

    if config.plot and not args.no_plot:
        ax = plot_configuration(robot, local.q, points=[point, target])
        ax.set_title(f"{config.end_effector} -> {config.target}")
        plt.show()


if __name__ == "__main__":
    main()
